import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic_settings import BaseSettings

from filingkit.utils.vocabulary import COURT_FAX_MAP


@dataclass(frozen=True)
class ExtractionConfig:
    """
    Immutable configuration injected into FieldExtractor.

    - court_fax_map: court name (division qualifier stripped) → fax number
    - own_lawyer_names: the filer's own counsel, never reported as opposing counsel
    - own_fax_numbers: the filer's own fax numbers, discarded before role classification
    - require_counsel_proximity: drop unlabeled fax numbers that have no counsel
      evidence nearby instead of assigning them to opposing counsel
    """
    court_fax_map: Mapping[str, str] = field(default_factory=lambda: COURT_FAX_MAP)
    own_lawyer_names: Tuple[str, ...] = ()
    own_fax_numbers: Tuple[str, ...] = ()
    require_counsel_proximity: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'court_fax_map', MappingProxyType(dict(self.court_fax_map)))
        object.__setattr__(self, 'own_lawyer_names', tuple(n for n in self.own_lawyer_names if n))
        object.__setattr__(self, 'own_fax_numbers', tuple(f for f in self.own_fax_numbers if f))

    @property
    def known_court_faxes(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(self.court_fax_map.values()))


class Settings(BaseSettings):
    # Logging
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Own office (self-match exclusion)
    OWN_LAWYER_NAMES: List[str] = []
    OWN_FAX_NUMBERS: List[str] = []

    # Extraction
    COURT_FAX_OVERRIDES: Dict[str, str] = {}
    REQUIRE_COUNSEL_PROXIMITY_FOR_FAX: bool = False

    # Receipt annotation
    DEFAULT_SIGNER_TITLE: str = "被告訴訟代理人"
    FALLBACK_SIGNER_NAME: str = "山田太郎"
    RECEIPT_FONT_SIZE: float = 10.5
    SEAL_SIZE: float = 36.0

    class Config:
        env_file = ".env"
        case_sensitive = True

    def extraction_config(self) -> ExtractionConfig:
        court_fax_map = dict(COURT_FAX_MAP)
        court_fax_map.update(self.COURT_FAX_OVERRIDES)
        return ExtractionConfig(
            court_fax_map=court_fax_map,
            own_lawyer_names=tuple(self.OWN_LAWYER_NAMES),
            own_fax_numbers=tuple(self.OWN_FAX_NUMBERS),
            require_counsel_proximity=self.REQUIRE_COUNSEL_PROXIMITY_FOR_FAX,
        )

    def default_signer_name(self) -> str:
        """Last listed own lawyer, the one who usually signs receipts."""
        if self.OWN_LAWYER_NAMES:
            return self.OWN_LAWYER_NAMES[-1]
        return self.FALLBACK_SIGNER_NAME

    def log_level(self) -> str:
        """DEBUG forces debug output regardless of LOG_LEVEL."""
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL.upper()


def configure_logging(level: Optional[str] = None) -> None:
    """Root logging setup for a deployment surface (CLI, server, notebook)."""
    logging.basicConfig(
        level=(level or settings.log_level()).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
