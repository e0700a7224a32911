"""Core conversion package.

Composition:
    - `engine`: conversion orchestrator and state machine.
    - `conversion_types`: data contracts shared across the pipeline.
    - `code_extractor`: fenced-code isolation from model replies.
    - `errors`: pipeline error taxonomy.

Package import itself is side-effect free.
"""
