"""
Configuration subsystem for the KeyAuth admin bot.

- **config.py**: static configuration from environment variables (.env aware)
- **settings.py**: immutable objects injected into the client and dispatcher

Usage
-----
```python
from src.core.config import Config

Config.validate()
settings = Config.keyauth_settings()
admins = Config.admin_set()
```
"""

from src.core.config.config import Config, Environment
from src.core.config.settings import AdminSet, KeyAuthSettings

__all__ = [
    "Config",
    "Environment",
    "AdminSet",
    "KeyAuthSettings",
]
