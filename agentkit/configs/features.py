"""Feature flags config."""

from pydantic import BaseModel, Field


class FeatureFlagsConfig(BaseModel):
    """Feature flags.

    Flags come from the `features` section of the configuration, e.g.
    `{"features": {"flags": {"new_scheduler": true}}}` in `features.json` or
    `APP_FEATURES__FLAGS='{"new_scheduler": true}'`.

    """

    flags: dict[str, bool] = Field(default_factory=dict, description="Feature flags by name.")

    def is_enabled(self, name: str) -> bool:
        """Check a flag. Unknown flags are disabled."""
        return self.flags.get(name, False)
