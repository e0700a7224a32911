"""figma2jsx adapter package.

Architectural role:
- Defines the external interaction boundary for HTTP and CLI interfaces.
- Hosts input acquisition (`multimodal`) shared by both adapters.
- Delegates conversion work to `figma2jsx.core.engine`.
"""
