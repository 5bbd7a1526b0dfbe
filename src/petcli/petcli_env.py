from pathlib import Path
import os
import tomllib
from pydantic import BaseModel, Field, ValidationError, model_validator
from typing import Optional, Callable
from jinja2 import Template


# ─── Config Schema ─────────────────────────────────────────────────
class UIConfig(BaseModel):
    tick_rate_ms: int = Field(200, ge=1)
    footer: str = "pet-CLI 2021 - all rights reserved"


class RecordsConfig(BaseModel):
    id_max: int = Field(999999, ge=1)
    min_age: int = Field(1, ge=0)
    max_age: int = 15

    @model_validator(mode="after")
    def check_age_bounds(self):
        if self.max_age <= self.min_age:
            raise ValueError(
                f"max_age ({self.max_age}) must be greater than min_age ({self.min_age})"
            )
        return self


class PetcliConfig(BaseModel):
    title: str = "Petcli Configuration"
    ui: UIConfig = UIConfig()
    records: RecordsConfig = RecordsConfig()


# ─── Commented Template ────────────────────────────────────
CONFIG_TEMPLATE = """\
title = "{{ title }}"

[ui]
# tick_rate_ms: int >= 1
# milliseconds between timer ticks; each tick redraws the screen
tick_rate_ms = {{ ui.tick_rate_ms }}

# footer: str
# the line shown at the bottom of the screen
footer = "{{ ui.footer }}"

[records]
# settings for randomly generated pets.

# id_max: int >= 1
# ids are drawn from 0 up to, but not including, id_max.
# ids are not checked for uniqueness.
id_max = {{ records.id_max }}

# min_age, max_age: int
# ages are drawn from min_age up to, but not including, max_age.
min_age = {{ records.min_age }}
max_age = {{ records.max_age }}

"""

# ─── Save Config with Comments ───────────────────────────────


def render_config(config: PetcliConfig) -> str:
    template = Template(CONFIG_TEMPLATE)
    return template.render(**config.model_dump()).strip() + "\n"


def save_config_from_template(config: PetcliConfig, path: Path):
    path.write_text(render_config(config), encoding="utf-8")
    print(f"✅ Config with comments written to: {path}")


# ─── Main Environment Class ───────────────────────────────


class PetcliEnvironment:
    def __init__(self):
        self._home = self._resolve_home()
        self._config: Optional[PetcliConfig] = None

    @property
    def home(self) -> Path:
        return self._home

    @property
    def config_path(self) -> Path:
        return self.home / "config.toml"

    @property
    def db_path(self) -> Path:
        return self.home / "db.json"

    @property
    def log_dir(self) -> Path:
        return self.home / "logs"

    def ensure(
        self,
        init_config: bool = True,
        init_db_fn: Optional[Callable[[Path], None]] = None,
    ):
        self.home.mkdir(parents=True, exist_ok=True)

        if init_config and not self.config_path.exists():
            save_config_from_template(PetcliConfig(), self.config_path)

        if init_db_fn and not self.db_path.exists():
            init_db_fn(self.db_path)

    def load_config(self) -> PetcliConfig:
        # Step 1: Create the file if it doesn't exist
        if not self.config_path.exists():
            config = PetcliConfig()
            self.home.mkdir(parents=True, exist_ok=True)
            self.config_path.write_text(render_config(config), encoding="utf-8")
            print(f"✅ Created new config file at {self.config_path}")
            self._config = config
            return config

        # Step 2: Try to load and validate the config
        try:
            with open(self.config_path, "rb") as f:
                data = tomllib.load(f)
            config = PetcliConfig.model_validate(data)
        except (ValidationError, tomllib.TOMLDecodeError) as e:
            print(f"⚠️ Config error in {self.config_path}: {e}\nUsing defaults.")
            self._config = PetcliConfig()
            return self._config

        # Step 3: Regenerate the canonical version so new defaults show up
        rendered = render_config(config)
        current_text = self.config_path.read_text(encoding="utf-8")
        if rendered != current_text:
            self.config_path.write_text(rendered, encoding="utf-8")
            print(f"✅ Updated {self.config_path} with any missing defaults.")

        self._config = config
        return config

    @property
    def config(self) -> PetcliConfig:
        if self._config is None:
            return self.load_config()
        return self._config

    def _resolve_home(self) -> Path:
        cwd = Path.cwd()
        if (cwd / "config.toml").exists() and (cwd / "db.json").exists():
            return cwd

        env_home = os.getenv("PETCLI_HOME")
        if env_home:
            return Path(env_home).expanduser()

        xdg_home = os.getenv("XDG_CONFIG_HOME")
        if xdg_home:
            return Path(xdg_home).expanduser() / "petcli"
        else:
            return Path.home() / ".config" / "petcli"
