"""Runtime settings and fixed outcome tables."""

from pathlib import Path
from typing import Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WizardSettings(BaseSettings):
    """Settings read from ``WIZARD_*`` environment variables or a ``.env`` file."""

    model_config = SettingsConfigDict(
        env_prefix="WIZARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = Field(default_factory=lambda: Path.cwd() / "data", description="Directory holding the datasets")
    terminal_node_id: str = Field("END", description="Node id that marks completion")
    max_hub_hops: int = Field(50, ge=1, description="Upper bound on consecutive hub evaluations")
    verbose: bool = Field(False, description="Enable debug logging")


# Flag whose string value names the role of the assessed system.
SYSTEM_ROLE_FLAG = 'flag_ai_system_role'

# Role value -> role outcome id
ROLE_OUTCOMES: Dict[str, str] = {
    'provider': 'flag_ai_system_role_provider',
    'deployer': 'flag_ai_system_role_deployer',
    'importer': 'flag_ai_system_role_importer',
    'distributor': 'flag_ai_system_role_distributor',
    'authorisedrepre': 'flag_ai_system_role_authorisedrepre',
    'productmanufacturer': 'flag_ai_system_role_productmanufacturer',
}

# Most severe first
RISK_LEVEL_PRIORITY: List[str] = [
    'prohibited',
    'systemic_risk',
    'high_risk',
    'obligations',
    'transparency_obligations',
    'open_source_exception',
    'general',
    'out_of_scope',
    'not_applicable',
    'role_classification',
]

DEFAULT_RISK_LEVEL = 'general'

STRUCTURE_LEVELS = ('role', 'risk_level', 'obligation')
