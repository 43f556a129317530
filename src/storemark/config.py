from __future__ import annotations

from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

# Размеры вида "512KB", "4MB" -> KiB
UNITS = {"kb": 1, "mb": 1024, "gb": 1024**2}


def parse_size_kb(s: Union[str, int]) -> int:
    if isinstance(s, int):
        return s
    s = s.strip().lower()
    for u, mul in UNITS.items():
        if s.endswith(u):
            return int(float(s[:-len(u)]) * mul)
    return int(s)


class RunConfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    mode: Optional[str] = None
    address: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("address", "nameserver_nodes", "nameserver-nodes"),
    )
    count: Optional[int] = Field(default=None, ge=0)
    threads: Optional[int] = Field(default=None, gt=0)
    seed: Optional[int] = None
    # Размер файла в KiB (или строка "4MB")
    file_size: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("file_size", "file-size"),
    )
    storage_options: Optional[Dict[str, Any]] = Field(
        default=None,
        validation_alias=AliasChoices("storage_options", "storage-options"),
    )

    @field_validator("file_size", mode="before")
    @classmethod
    def _parse_file_size(cls, value):
        if value is None:
            return value
        return parse_size_kb(value)


@dataclass
class RunSettings:
    mode: str
    address: str
    count: int
    threads: int
    seed: int
    file_size: int
    storage_options: Dict[str, Any] = field(default_factory=dict)

    def to_namespace(self) -> Namespace:
        return Namespace(**asdict(self))


def load_run_config(path: str) -> RunConfigModel:
    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with config_path.open("r", encoding="utf-8") as fh:
        parsed = yaml.safe_load(fh) or {}
    if isinstance(parsed, dict) and "run" in parsed and isinstance(parsed["run"], dict):
        parsed = parsed["run"]
    if not isinstance(parsed, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping at the top level.")
    try:
        return RunConfigModel(**parsed)
    except ValidationError as exc:
        raise ValueError(f"Invalid run configuration in {config_path}: {exc}") from exc


def resolve_run_settings(cli_args: Namespace, config: Optional[RunConfigModel]) -> RunSettings:
    def pick(name: str, default=None):
        cli_value = getattr(cli_args, name, None)
        if cli_value is not None:
            return cli_value
        if config is not None:
            conf_value = getattr(config, name)
            if conf_value is not None:
                return conf_value
        return default

    mode = pick("mode", default="put")
    if mode not in {"put", "read"}:
        raise SystemExit(f"run: unknown mode {mode!r} (expected put or read)")

    address = pick("address")
    if not address:
        raise SystemExit("run: missing store address (use --address or set in config file)")

    count = pick("count", default=0)
    threads = pick("threads", default=5)
    seed = pick("seed", default=301)
    file_size = parse_size_kb(pick("file_size", default=1024))
    if count < 0:
        raise SystemExit("run: --count must be >= 0")
    if threads <= 0:
        raise SystemExit("run: --threads must be > 0")
    if file_size < 0:
        raise SystemExit("run: --file-size must be >= 0")

    return RunSettings(
        mode=mode,
        address=address,
        count=count,
        threads=threads,
        seed=seed,
        file_size=file_size,
        storage_options=dict(pick("storage_options", default={}) or {}),
    )
