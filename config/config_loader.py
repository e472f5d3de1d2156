# =========================================
# 📄 File: config/config_loader.py
# Purpose: Load YAML config (dev/prod), substitute ${ENV_VARS}, validate, and expose helpers
# =========================================

import os                      # Used to read ENV to pick dev/prod and to resolve ${VAR} placeholders
import re                      # Used to find and replace ${VAR} patterns inside YAML text
import sys                     # Used to exit early with a clear error message on invalid config
from typing import Dict, Any, Optional   # Type hints for better readability and tooling
from urllib.parse import urlsplit, urlunsplit
import yaml                    # Safe YAML parsing (install: PyYAML)
from dotenv import load_dotenv  # Pulls DATABASE_URL from a local .env file when present

CONFIG_DIR = os.path.dirname(os.path.abspath(__file__))   # YAML files live next to this module


def _substitute_env_placeholders(yaml_text: str) -> str:
    """
    Replace ${VAR} placeholders in YAML text with their environment variable values.
    If an env var is missing, mark it as <MISSING:VAR> to fail validation cleanly.
    """
    pattern = re.compile(r"\$\{([^}^{]+)\}")
    def repl(match):
        var_name = match.group(1)                              # Extract VAR name from ${VAR}
        return os.getenv(var_name, f"<MISSING:{var_name}>")    # Return env value or a sentinel
    return pattern.sub(repl, yaml_text)


def _load_yaml_file(path: str) -> Dict[str, Any]:
    """
    Read a YAML file from disk, perform ${VAR} substitution, and parse it to a dict.
    """
    if not os.path.exists(path):
        print(f"❌ Configuration file not found: {path}", file=sys.stderr)
        sys.exit(1)

    with open(path, "r", encoding="utf-8") as f:
        raw = f.read()

    substituted = _substitute_env_placeholders(raw)

    try:
        cfg = yaml.safe_load(substituted)
    except yaml.YAMLError as e:
        print(f"❌ YAML parsing error in {path}: {e}", file=sys.stderr)
        sys.exit(1)

    if not isinstance(cfg, dict):                              # Empty file or a bare scalar
        print(f"❌ Configuration in {path} must be a mapping", file=sys.stderr)
        sys.exit(1)

    return cfg


def _validate_config(cfg: Dict[str, Any]) -> None:
    """
    Validate presence of required keys and ensure no <MISSING:...> placeholders remain.
    """
    required_top = [
        "environment", "log_level", "database_url", "db_schema",
        "batch_size", "max_workers",
    ]
    missing_top = [k for k in required_top if k not in cfg or cfg[k] in (None, "")]
    if missing_top:
        print(f"❌ Missing top-level config keys: {', '.join(missing_top)}", file=sys.stderr)
        sys.exit(1)

    # The connection string is the one setting the job cannot run without
    if "MISSING:" in str(cfg["database_url"]):
        print("❌ DATABASE_URL is not set (environment or .env file).", file=sys.stderr)
        sys.exit(1)

    for key in ("batch_size", "max_workers"):
        value = cfg[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            print(f"❌ Config key '{key}' must be a positive integer, got {value!r}", file=sys.stderr)
            sys.exit(1)


def get_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Public API: load .env, pick env from ENV (default 'dev'), load YAML, validate, return dict.
    An explicit path skips the ENV-based lookup.
    """
    load_dotenv()                                             # .env never overrides real env vars
    if path is None:
        env = os.getenv("ENV", "dev").lower()                 # Choose 'dev' or 'prod' by ENV variable
        path = os.path.join(CONFIG_DIR, f"{env}.yaml")        # Build path like config/dev.yaml
    cfg = _load_yaml_file(path)
    _validate_config(cfg)
    return cfg


def mask_db_url(url: str) -> str:
    """
    Hide the password of a connection URL so it can be logged safely.
    """
    parts = urlsplit(url)
    if parts.password is None:
        return url
    netloc = parts.netloc.replace(f":{parts.password}@", ":***@", 1)
    return urlunsplit(parts._replace(netloc=netloc))
