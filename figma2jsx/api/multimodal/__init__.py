"""Screenshot and clipboard input handling for the adapters.

Architectural role:
- Normalizes file selection, clipboard paste, and Figma JSON text into one
  active input.
- Encodes image payloads as data URLs for embedding in requests.
- Issues and revokes transient preview URLs.
"""
