"""Parse config documents and resolve them, with inheritance, into a Config."""

from __future__ import annotations

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import yaml

from gitsweep.config.defaults import DEFAULT_TOML
from gitsweep.config.schema import MAX_EXTEND_DEPTH, Config, Extends
from gitsweep.rules.models import Allowlist, EntropyRange, Rule

logger = logging.getLogger(__name__)

REPO_CONFIG_NAMES = (".gitsweep.toml", "gitsweep.toml")


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


# ---- raw documents ----


def _lower_keys(value: Any) -> Any:
    """Lower-case mapping keys recursively (``useDefault`` == ``usedefault``)."""
    if isinstance(value, Mapping):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_lower_keys(v) for v in value]
    return value


def parse_document(text: str, fmt: str = "toml", source: str = "<string>") -> Dict[str, Any]:
    """Parse a TOML or YAML config document into a plain dict."""
    try:
        if fmt == "yaml":
            data = yaml.safe_load(text) or {}
        else:
            data = tomllib.loads(text)
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to parse {source}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError(f"Failed to parse {source}: top level must be a table")
    return _lower_keys(data)


def load_document(path: Path) -> Dict[str, Any]:
    """Read and parse the config document at *path*."""
    fmt = "yaml" if path.suffix in (".yaml", ".yml") else "toml"
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read config {path}: {exc}") from exc
    return parse_document(text, fmt, source=str(path))


# ---- compilation ----


def _compile(pattern: Optional[str], where: str) -> Optional[re.Pattern[str]]:
    if pattern is None or pattern == "":
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"{where}: invalid regex {pattern!r}: {exc}") from exc


def _compile_all(patterns: Optional[List[str]], where: str) -> List[re.Pattern[str]]:
    compiled = []
    for p in patterns or []:
        c = _compile(p, where)
        if c is not None:
            compiled.append(c)
    return compiled


def _build_allowlist(data: Optional[Mapping[str, Any]], where: str) -> Allowlist:
    data = data or {}
    return Allowlist(
        description=data.get("description", ""),
        regexes=_compile_all(data.get("regexes"), f"{where} allowlist"),
        files=_compile_all(data.get("files"), f"{where} allowlist"),
        paths=_compile_all(data.get("paths"), f"{where} allowlist"),
        commits=[str(c) for c in data.get("commits") or []],
        stopwords=[str(w) for w in data.get("stopwords") or []],
    )


def _build_entropies(entries: Optional[List[Mapping[str, Any]]], where: str) -> List[EntropyRange]:
    ranges: List[EntropyRange] = []
    for entry in entries or []:
        try:
            ranges.append(
                EntropyRange(
                    min=float(entry.get("min", 0)),
                    max=float(entry.get("max", 0)),
                    group=int(entry.get("group", 0)),
                )
            )
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{where}: invalid entropy range {entry!r}") from exc
    return ranges


def _build_rule(entry: Mapping[str, Any], index: int) -> Rule:
    rule_id = entry.get("id") or entry.get("description")
    if not rule_id:
        raise ConfigError(f"rule #{index} has neither an id nor a description")
    where = f"rule {rule_id}"

    regex = _compile(entry.get("regex"), where)
    try:
        secret_group = int(entry.get("secretgroup", 0) or 0)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{where}: invalid secret group {entry.get('secretgroup')!r}") from exc
    if regex is not None and secret_group > regex.groups:
        raise ConfigError(
            f"{where} invalid regex secret group {secret_group}, "
            f"max regex secret group {regex.groups}"
        )

    return Rule(
        id=str(rule_id),
        description=entry.get("description", ""),
        regex=regex,
        secret_group=secret_group,
        file=_compile(entry.get("file"), where),
        path=_compile(entry.get("path"), where),
        keywords=[str(k).lower() for k in entry.get("keywords") or []],
        tags=[str(t) for t in entry.get("tags") or []],
        entropies=_build_entropies(entry.get("entropies"), where),
        allowlist=_build_allowlist(entry.get("allowlist"), where),
    )


# ---- resolution ----


def resolve(
    raw: Mapping[str, Any],
    *,
    depth: int = 0,
    base_dir: Optional[Path] = None,
) -> Config:
    """Compile *raw* into a Config and merge whatever it extends.

    *depth* counts how many extensions led here; once it reaches
    MAX_EXTEND_DEPTH any further ``[extend]`` table is ignored.
    """
    raw = _lower_keys(raw)
    rules: Dict[str, Rule] = {}
    keywords: List[str] = []
    for index, entry in enumerate(raw.get("rules") or []):
        rule = _build_rule(entry, index)
        if rule.id in rules:
            raise ConfigError(f"duplicate rule id {rule.id!r}")
        rules[rule.id] = rule
        keywords.extend(rule.keywords)

    ext = raw.get("extend") or {}
    cfg = Config(
        description=raw.get("title") or raw.get("description") or "",
        rules=rules,
        allowlist=_build_allowlist(raw.get("allowlist"), "global"),
        keywords=keywords,
        extends=Extends(path=ext.get("path") or None, use_default=bool(ext.get("usedefault", False))),
    )

    if not cfg.extends.is_set:
        return cfg
    if depth >= MAX_EXTEND_DEPTH:
        logger.debug("extend depth %d reached, ignoring further extends", depth)
        return cfg

    if cfg.extends.use_default:
        logger.debug("extending config with default config")
        extend(cfg, resolve(parse_document(DEFAULT_TOML, source="default config"), depth=depth + 1))
    elif cfg.extends.path:
        ext_path = Path(cfg.extends.path)
        if base_dir is not None and not ext_path.is_absolute():
            ext_path = base_dir / ext_path
        logger.debug("extending config with %s", ext_path)
        extension = resolve(load_document(ext_path), depth=depth + 1, base_dir=ext_path.parent)
        extend(cfg, extension)
    return cfg


def extend(base: Config, extension: Config) -> None:
    """Merge *extension* into *base*. Existing rule ids are never replaced."""
    for rule_id, rule in extension.rules.items():
        if rule_id not in base.rules:
            base.rules[rule_id] = rule
            base.keywords.extend(rule.keywords)

    # allowlists are appended, not merged
    base.allowlist.commits.extend(extension.allowlist.commits)
    base.allowlist.files.extend(extension.allowlist.files)
    base.allowlist.paths.extend(extension.allowlist.paths)
    base.allowlist.regexes.extend(extension.allowlist.regexes)
    base.allowlist.stopwords.extend(extension.allowlist.stopwords)


# ---- entry points ----


def default_config() -> Config:
    """Return the embedded default rule-set."""
    return resolve(parse_document(DEFAULT_TOML, source="default config"))


def load_config(path: Path | str) -> Config:
    """Load and resolve the config file at *path*."""
    path = Path(path)
    cfg = resolve(load_document(path), base_dir=path.parent)
    cfg.path = str(path)
    return cfg


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override*, then ``GITSWEEP_CONFIG``, take precedence."""
    override = override or os.environ.get("GITSWEEP_CONFIG")
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    for name in REPO_CONFIG_NAMES:
        candidate = repo_root / name
        if candidate.is_file():
            return candidate
    return None


def load_repo_config(repo_root: Path) -> Config:
    """Load the config committed at the root of the repository."""
    for name in REPO_CONFIG_NAMES:
        candidate = repo_root / name
        if candidate.is_file():
            return load_config(candidate)
    raise ConfigError(f"problem loading repo config: no {' or '.join(REPO_CONFIG_NAMES)} in {repo_root}")
