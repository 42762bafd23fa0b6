from env.env import (
    Environment,
    LoggingEnvironment,
    get_env,
    reset_env_caches,
    get_logging_env,
    ConfigError,
    _load_dotenv,
)

from env.paths import PROJECT_ROOT, LOGS_DIR, logs_dir, module_logs_dir

__all__ = [
    "Environment",
    "LoggingEnvironment",
    "get_env",
    "reset_env_caches",
    "get_logging_env",
    "ConfigError",
    "LOGS_DIR",
    "PROJECT_ROOT",
    "logs_dir",
    "module_logs_dir",
    "_load_dotenv",
]
