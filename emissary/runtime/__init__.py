"""Message pipeline runtime.

Import concrete pieces from their modules, e.g.
``from emissary.runtime.engine import MessagePipeline``.
"""
