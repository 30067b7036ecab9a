"""
Core infrastructure for the KeyAuth admin bot.

Submodules
----------
- config: environment-backed static configuration and injected settings
- logging: queue-backed structured logging with interaction context
- validation: command argument validation
- exceptions: error taxonomy shared by the dispatcher and the client

Import from the submodules directly, e.g.
`from src.core.logging.logger import get_logger`.
"""
