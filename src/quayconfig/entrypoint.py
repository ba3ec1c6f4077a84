"""
CLI entrypoint that runs one synthesis pass from files on disk.

Reads a registry descriptor, the user's config bundle and the previously
persisted secret keys, then writes every rendered artifact plus the updated
secret keys into an output directory. Watching a live cluster is left to the
control plane; this is the file-in/file-out equivalent of a single reconcile.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml

from .core.config import ConfigError, load_settings
from .core.contracts import (
    ComponentKind,
    MalformedUserValueError,
    RegistryDescriptor,
    SecretKeySnapshot,
    UnknownComponentError,
)
from .modules.render.overlay_renderer import encode
from .pipeline import ALL_COMPONENTS, SynthesisPipeline, SynthesisResult

LOGGER = logging.getLogger(__name__)
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
SECRET_KEYS_FILENAME = "secret-keys.yaml"
TLS_CERT_FILENAME = "ssl.cert"
TLS_KEY_FILENAME = "ssl.key"


def _load_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc


def load_descriptor(path: Path) -> RegistryDescriptor:
    raw = _load_yaml(path)
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping")
    metadata = raw.get("metadata", raw)
    if not metadata.get("name"):
        raise ConfigError(f"{path} does not name the registry")
    return RegistryDescriptor(
        name=metadata["name"],
        namespace=metadata.get("namespace", "default"),
        annotations={str(k): str(v) for k, v in (metadata.get("annotations") or {}).items()},
    )


def load_user_config(path: Path | None) -> dict[str, Any]:
    if path is None:
        return {}
    raw = _load_yaml(path) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return raw


def load_secret_keys(path: Path | None) -> SecretKeySnapshot | None:
    if path is None or not path.exists():
        return None
    raw = _load_yaml(path)
    if not raw:
        return None
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping")
    try:
        return SecretKeySnapshot.from_manifest(raw)
    except KeyError as exc:
        raise ConfigError(f"{path} is missing {exc}") from exc
    except (AttributeError, TypeError, ValueError) as exc:
        raise ConfigError(f"{path} is not a valid secret keys manifest: {exc}") from exc


def write_result(result: SynthesisResult, output_dir: Path) -> list[Path]:
    """Write every artifact in `result` under `output_dir` and return the paths."""
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    def _write(path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        written.append(path)

    for filename, content in result.config_files.items():
        _write(output_dir / filename, content)
    for kind, files in result.component_files.items():
        for filename, content in files.items():
            _write(output_dir / kind.value / filename, content)
    if result.tls_cert is not None and result.tls_key is not None:
        _write(output_dir / TLS_CERT_FILENAME, result.tls_cert)
        _write(output_dir / TLS_KEY_FILENAME, result.tls_key)
    if result.secret_keys is not None:
        _write(output_dir / SECRET_KEYS_FILENAME, encode(result.secret_keys.to_manifest()))
    return written


def configure_logging(level: str) -> None:
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
    )


def parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Synthesize registry config overlays and managed secret keys."
    )
    parser.add_argument(
        "--descriptor",
        type=Path,
        required=True,
        help="YAML file describing the registry (name, namespace, annotations).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="User-supplied config bundle (YAML mapping of config keys).",
    )
    parser.add_argument(
        "--secret-keys",
        type=Path,
        default=None,
        help="Previously persisted managed secret keys; read if present.",
    )
    parser.add_argument(
        "--component",
        dest="components",
        action="append",
        default=None,
        metavar="KIND",
        help="Component to render (repeatable). Defaults to every managed component.",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Optional operator settings file (database credentials etc.).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        required=True,
        help="Directory that receives rendered artifacts.",
    )
    parser.add_argument(
        "--no-tls",
        action="store_true",
        help="Skip issuing a self-signed certificate for the route hostname.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO).",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)
    try:
        settings = load_settings(args.settings)
        descriptor = load_descriptor(args.descriptor)
        user_config = load_user_config(args.config)
        secret_keys = load_secret_keys(args.secret_keys)
        components: list[str | ComponentKind] = args.components or list(ALL_COMPONENTS)
        result = SynthesisPipeline(settings).run(
            descriptor,
            user_config,
            secret_keys,
            components=components,
            issue_tls=not args.no_tls,
        )
        written = write_result(result, args.output_dir)
    except (ConfigError, UnknownComponentError, MalformedUserValueError) as exc:
        LOGGER.error("Configuration failed: %s", exc)
        return 2
    except Exception:  # pragma: no cover - surfaced to operator
        LOGGER.exception("Config synthesis crashed.")
        return 1
    LOGGER.info("Wrote %d files to %s", len(written), args.output_dir)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())


__all__ = ["load_descriptor", "main", "write_result"]
