"""Immutable view-state for the generator form.

``FormState`` holds everything the form shows: the field values, the last
generated script and the copy-feedback flag.  Every event returns a new
state; nothing is mutated in place, so a front end only has to swap the
state it renders.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ncgen.composer.models import DeploymentConfig, Instance
from ncgen.composer.script import compose
from ncgen.config import ConfigError

DEFAULT_PROJECT_DIR = "nextcloud-caddy"
DEFAULT_ADMIN_USER = "admin"

EDITABLE_FIELDS = ("domain", "admin_user")


class InstanceDraft(BaseModel):
    """An instance row as typed into the form; may still be blank."""

    model_config = ConfigDict(frozen=True)

    domain: str = ""
    admin_user: str = DEFAULT_ADMIN_USER

    @property
    def is_complete(self) -> bool:
        return bool(self.domain.strip()) and bool(self.admin_user.strip())


class FormState(BaseModel):
    """Snapshot of the generator form."""

    model_config = ConfigDict(frozen=True)

    project_dir: str = DEFAULT_PROJECT_DIR
    acme_email: str = ""
    instances: tuple[InstanceDraft, ...] = Field(default_factory=lambda: (InstanceDraft(),))
    generated_script: str = ""
    copied: bool = False

    # -- Derived -------------------------------------------------------------

    @property
    def is_valid(self) -> bool:
        """Whether the form can be turned into a ``DeploymentConfig``."""
        return (
            bool(self.project_dir.strip())
            and bool(self.acme_email.strip())
            and len(self.instances) > 0
            and all(inst.is_complete for inst in self.instances)
        )

    def to_config(self) -> DeploymentConfig:
        """Build the composer input from the current field values.

        Raises:
            ConfigError: If the form is not valid.
        """
        if not self.is_valid:
            raise ConfigError("form is incomplete: every field needs a value")
        return DeploymentConfig(
            project_dir=self.project_dir,
            acme_email=self.acme_email,
            instances=tuple(
                Instance(domain=inst.domain, admin_user=inst.admin_user)
                for inst in self.instances
            ),
        )

    # -- Field events --------------------------------------------------------

    def set_project_dir(self, value: str) -> "FormState":
        return self.model_copy(update={"project_dir": value})

    def set_acme_email(self, value: str) -> "FormState":
        return self.model_copy(update={"acme_email": value})

    def set_instance_field(self, index: int, field: str, value: str) -> "FormState":
        """Change ``domain`` or ``admin_user`` of the instance at *index*.

        Raises:
            ValueError: If *field* is not editable.
            IndexError: If *index* is out of range.
        """
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"unknown instance field: {field!r}")
        if not 0 <= index < len(self.instances):
            raise IndexError(f"instance index out of range: {index}")
        updated = self.instances[index].model_copy(update={field: value})
        instances = self.instances[:index] + (updated,) + self.instances[index + 1 :]
        return self.model_copy(update={"instances": instances})

    # -- Instance list events ------------------------------------------------

    def add_instance(self) -> "FormState":
        return self.model_copy(update={"instances": self.instances + (InstanceDraft(),)})

    def remove_instance(self, index: int) -> "FormState":
        """Drop the instance at *index*; the last remaining one is kept."""
        if len(self.instances) <= 1 or not 0 <= index < len(self.instances):
            return self
        instances = self.instances[:index] + self.instances[index + 1 :]
        return self.model_copy(update={"instances": instances})

    # -- Output events -------------------------------------------------------

    def generate(self) -> "FormState":
        """Render the script; an invalid form is returned unchanged."""
        if not self.is_valid:
            return self
        return self.model_copy(
            update={"generated_script": compose(self.to_config()), "copied": False}
        )

    def mark_copied(self) -> "FormState":
        if not self.generated_script:
            return self
        return self.model_copy(update={"copied": True})

    def reset_copied(self) -> "FormState":
        return self.model_copy(update={"copied": False})
