# SignSync Default Configuration
# Full default configuration as Python dict and YAML generator

from typing import Any

import yaml

from signsync.config.schema import DEFAULT_EXTENSIONS

DEFAULT_CONFIG: dict[str, Any] = {
    "media": {
        "root": "./media",
        "extensions": list(DEFAULT_EXTENSIONS),
        "url_prefix": "/media/",
        "publish_partial_scans": False,
    },
    "storage": {
        "bucket": "",
        "region": "sa-east-1",
        "prefix": "",
        "connect_timeout": 10.0,
        "read_timeout": 60.0,
        "max_attempts": 3,
    },
    "sync": {
        "interval_minutes": 15,
        "state_file": "~/.config/signsync/.sync_state.yaml",
    },
    "output": {
        "verbose": False,
        "colored": True,
    },
}


def generate_default_config() -> str:
    """Generate default configuration as YAML string with comments."""
    header = """# SignSync Configuration
#
# Keeps a local media directory in sync with an S3 bucket and publishes
# the sorted media inventory to the signage player.
#
# storage.bucket: leave empty to serve local files only (no remote sync)
# Environment overrides: MEDIA_DIR, S3_BUCKET, S3_REGION, S3_PREFIX,
#                        S3_ENDPOINT_URL, SYNC_INTERVAL_MINUTES
# Credentials come from the standard AWS chain (AWS_ACCESS_KEY_ID, ...).

"""
    return header + yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)
