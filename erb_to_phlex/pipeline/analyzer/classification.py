"""
Result of analysing the Ruby embedded in a template.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class NameClassification:
    """Names referenced by a template, grouped by the role they play.

    Attributes:
        fields: Instance variables (``@user`` -> ``user``)
        locals: Free variables, inferred as component parameters
        bound: Names bound inside the template (block parameters, assignments)
        calls: Every receiver and helper name that is invoked
        value_helpers: Helper calls whose result is consumed by other code
        output_helpers: Helper calls used as statements, rendering by themselves
        consts: Constants (type references)
        includes: phlex-rails modules needed by the helpers in use
    """

    fields: set[str] = field(default_factory=set)
    locals: set[str] = field(default_factory=set)
    bound: set[str] = field(default_factory=set)
    calls: set[str] = field(default_factory=set)
    value_helpers: set[str] = field(default_factory=set)
    output_helpers: set[str] = field(default_factory=set)
    consts: set[str] = field(default_factory=set)
    includes: set[str] = field(default_factory=set)

    @property
    def parameters(self) -> list[str]:
        """Constructor keywords: every field and free variable."""
        return sorted(self.fields | self.locals)

    @property
    def accessors(self) -> list[str]:
        """Free variables read through an accessor rather than an instance variable."""
        return sorted(self.locals - self.fields)

    @property
    def registered_output_helpers(self) -> list[str]:
        return sorted(self.output_helpers)

    @property
    def registered_value_helpers(self) -> list[str]:
        # A name used as a statement anywhere is registered as an output helper only
        return sorted(self.value_helpers - self.output_helpers)

    @property
    def registered_includes(self) -> list[str]:
        return sorted(self.includes)

    def is_output_helper(self, name: str) -> bool:
        return name in self.output_helpers
