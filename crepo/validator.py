from dataclasses import dataclass
from typing import ClassVar

from loguru import logger

from .config import CrepoConfig
from .errors import CrepoError


@dataclass
class ValidationError(CrepoError):
    field: str

    def __str__(self) -> str:
        # The repo is not identified, only the missing field.
        return f"{self.field.capitalize()} missing for repo."


@dataclass(frozen=True)
class Validator:
    config: CrepoConfig
    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ("directory", "remote", "refspec")

    def validate(self) -> None:
        self.check()
        logger.info("Config file is valid")

    def check(self) -> None:
        """Raise on the first missing field of the first invalid repo."""
        for repo_config in self.config:
            for field in self.REQUIRED_FIELDS:
                if not getattr(repo_config, field):
                    raise ValidationError(field)
