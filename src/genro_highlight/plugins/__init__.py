"""Plugin package for the Genro Highlight bridge.

Note: Do not import concrete plugins here to keep imports side-effect free.
Concrete plugin modules self-register when imported via the main
genro_highlight package.
"""

__all__: list[str] = []
