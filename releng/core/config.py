"""Typed settings loading.

Settings are assembled once per invocation and passed explicitly to every
flow. Priority, highest first: command-line options, ``RELENG_*``
environment variables, the ``[releng]`` table of ``.releng.toml`` in the
project root, defaults.

Example ``.releng.toml``:

    [releng]
    bot_username = "release-bot"
    github_org = "example"
    module_filter = "github.com/example/"
    main_branch = "main"
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from releng.core.result import Err, Ok, Result
from releng.core.structured import StrDict, as_str_dict, get_str, get_table
from releng.version.language import Language
from releng.version.semver import SemanticVersion, VersionParseError

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_BOT_USERNAME",
    "DEFAULT_DEPENDENCY_BOT",
    "DEFAULT_VERSION_FILE",
    "FALLBACK_VERSION_FILE",
    "BotIdentities",
    "ConfigError",
    "ProjectSettings",
    "Settings",
    "load_settings",
    "read_base_version",
]

CONFIG_FILE_NAME = ".releng.toml"
DEFAULT_VERSION_FILE = Path("version")
FALLBACK_VERSION_FILE = Path("common/version/VERSION")

DEFAULT_BOT_USERNAME = "releng-ci"
DEFAULT_DEPENDENCY_BOT = "dependabot[bot]"
DEFAULT_MAIN_BRANCH = "main"

_ENV_PREFIX = "RELENG_"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Settings could not be loaded, or the base version is unusable."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class BotIdentities:
    """Author names whose commits never show up in release notes."""

    bot_username: str = DEFAULT_BOT_USERNAME
    dependency_bot: str = DEFAULT_DEPENDENCY_BOT

    def is_automation(self, author_name: str) -> bool:
        return author_name == self.bot_username

    def is_bot(self, author_name: str) -> bool:
        return author_name in (self.bot_username, self.dependency_bot)


@dataclass(frozen=True, slots=True)
class ProjectSettings:
    """Project-family settings.

    ``github_org`` and ``module_filter`` default to the organisation of the
    project's own module path when left unset.
    """

    github_org: str | None = None
    module_filter: str | None = None
    main_branch: str = DEFAULT_MAIN_BRANCH


@dataclass(frozen=True, slots=True)
class Settings:
    """Everything a command needs besides its own arguments."""

    root: Path = field(default_factory=Path.cwd)
    verbose: bool = False
    quiet: bool = False
    dry_run: bool = False
    language: Language = Language.GO
    base_version: str | None = None
    base_version_file: Path = DEFAULT_VERSION_FILE
    bots: BotIdentities = field(default_factory=BotIdentities)
    project: ProjectSettings = field(default_factory=ProjectSettings)

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, root: Path) -> Settings:
        """Create Settings from the ``[releng]`` table of a parsed TOML file."""
        table: StrDict = get_table(data, "releng") or {}
        version_file = get_str(table, "version_file")
        return cls(
            root=root,
            base_version_file=Path(version_file) if version_file else DEFAULT_VERSION_FILE,
            bots=BotIdentities(
                bot_username=get_str(table, "bot_username") or DEFAULT_BOT_USERNAME,
                dependency_bot=get_str(table, "dependency_bot") or DEFAULT_DEPENDENCY_BOT,
            ),
            project=ProjectSettings(
                github_org=get_str(table, "github_org"),
                module_filter=get_str(table, "module_filter"),
                main_branch=get_str(table, "main_branch") or DEFAULT_MAIN_BRANCH,
            ),
        )

    def with_env(self, env: Mapping[str, str]) -> Settings:
        """Apply ``RELENG_*`` environment overrides."""

        def pick(name: str, current: str | None) -> str | None:
            value = env.get(_ENV_PREFIX + name, "").strip()
            return value or current

        return replace(
            self,
            bots=BotIdentities(
                bot_username=pick("BOT_USERNAME", self.bots.bot_username) or DEFAULT_BOT_USERNAME,
                dependency_bot=pick("DEPENDENCY_BOT", self.bots.dependency_bot)
                or DEFAULT_DEPENDENCY_BOT,
            ),
            project=ProjectSettings(
                github_org=pick("GITHUB_ORG", self.project.github_org),
                module_filter=pick("MODULE_FILTER", self.project.module_filter),
                main_branch=pick("MAIN_BRANCH", self.project.main_branch) or DEFAULT_MAIN_BRANCH,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_text(encoding="utf-8"))
    except PermissionError:
        return Err(ConfigError(f"permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"invalid TOML syntax: {e}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("config root must be a TOML table", path=path))
    return Ok(data)


def load_settings(
    root: Path,
    *,
    verbose: bool = False,
    quiet: bool = False,
    dry_run: bool = False,
    language: Language = Language.GO,
    base_version: str | None = None,
    base_version_file: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Result[Settings, ConfigError]:
    """Load settings for the project at ``root``.

    A missing ``.releng.toml`` is fine; a malformed one is an error.
    """
    config_path = root / CONFIG_FILE_NAME
    if config_path.is_file():
        parsed = _parse_toml(config_path)
        if isinstance(parsed, Err):
            return parsed
        settings = Settings.from_dict(parsed.value, root=root)
    else:
        settings = Settings(root=root)

    settings = settings.with_env(os.environ if env is None else env)
    return Ok(
        replace(
            settings,
            verbose=verbose,
            quiet=quiet,
            dry_run=dry_run,
            language=language,
            base_version=base_version.strip() if base_version else None,
            base_version_file=base_version_file or settings.base_version_file,
        )
    )


def read_base_version(settings: Settings) -> Result[SemanticVersion, ConfigError]:
    """Return the base version from the explicit option or the version file.

    When the configured file cannot be read, ``common/version/VERSION`` is
    tried before giving up.
    """
    text = settings.base_version
    source: Path | None = None
    if text is None:
        candidates = [settings.base_version_file, FALLBACK_VERSION_FILE]
        for candidate in candidates:
            path = candidate if candidate.is_absolute() else settings.root / candidate
            try:
                text = path.read_text(encoding="utf-8").strip()
            except OSError:
                continue
            source = path
            break

    if text is None:
        return Err(
            ConfigError(
                f"unable to load base version information from '{settings.base_version_file}'",
                path=settings.base_version_file,
                hint=f"current dir: {settings.root}",
            )
        )

    try:
        return Ok(SemanticVersion.parse(text))
    except VersionParseError:
        return Err(ConfigError(f"invalid base version {text!r}", path=source))
