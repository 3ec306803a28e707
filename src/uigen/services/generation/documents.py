"""Document model
==============

The structured UI description built by the DSL builders and consumed by
the code synthesizer. ``Document`` is a tagged union; every variant carries
a ``kind`` discriminator the synthesizer dispatches on.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

from uigen.constants import DocumentKind
from uigen.services.service_base import ValidationError


@dataclass
class FieldOption:
    label: str
    value: str


@dataclass
class FormField:
    """A single form input.

    Attributes:
        name: Identifier, unique within its document
        type: text, email, password, tel, number, textarea, select, checkbox,
            radio, switch, slider, datepicker or date
        label: Visible label
        placeholder: Placeholder text (omitted from markup when None)
        required: Whether the field must be filled in
        validation: Optional ``minLength``/``maxLength``/``pattern``/``custom`` keys
        helper_text: Hint rendered under the input
        options: Choices for select and radio fields
    """
    name: str
    type: str = "text"
    label: str = ""
    placeholder: Optional[str] = None
    required: bool = True
    validation: Dict[str, Any] = field(default_factory=dict)
    helper_text: Optional[str] = None
    options: List[FieldOption] = field(default_factory=list)


class _DocumentBase:
    kind: DocumentKind

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)  # type: ignore[call-overload]
        data['kind'] = self.kind.value
        return data


@dataclass
class FormDocument(_DocumentBase):
    title: str
    description: str
    fields: List[FormField]
    submit_text: str = "Submit"
    success_message: str = "Form submitted successfully!"
    form_type: Optional[str] = None
    kind: DocumentKind = field(default=DocumentKind.FORM, init=False)


@dataclass
class PageModule:
    """Module placed in a page region: navigation, hero, pricing, faq or footer."""
    type: str
    props: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PageDocument(_DocumentBase):
    title: str
    # header / sidebar / content / footer / main
    regions: Dict[str, List[PageModule]] = field(default_factory=dict)
    kind: DocumentKind = field(default=DocumentKind.PAGE, init=False)


@dataclass
class Widget:
    """Dashboard widget: metric, table or chart."""
    type: str
    title: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DashboardDocument(_DocumentBase):
    title: str
    widgets: List[Widget] = field(default_factory=list)
    kind: DocumentKind = field(default=DocumentKind.DASHBOARD, init=False)


@dataclass
class DecisionDocument(_DocumentBase):
    """Comparison/decision block document.

    ``options`` and ``items`` are plain dicts because they are serialized
    verbatim into the block's props.
    """
    pattern: str
    title: str
    description: Optional[str] = None
    options: List[Dict[str, Any]] = field(default_factory=list)
    items: List[Dict[str, Any]] = field(default_factory=list)
    confirm_text: Optional[str] = None
    cancel_text: Optional[str] = None
    action_contract_id: Optional[str] = None
    kind: DocumentKind = field(default=DocumentKind.DECISION, init=False)


@dataclass
class ScreenComponent:
    component: str
    props: Dict[str, Any] = field(default_factory=dict)
    position: str = "body"
    required: bool = False


@dataclass
class Screen:
    id: str
    name: str
    type: str
    components: List[ScreenComponent]
    layout: str


@dataclass
class NavigationEdge:
    from_screen: str
    to_screen: str
    trigger: str


@dataclass
class AppDocument(_DocumentBase):
    name: str
    screens: List[Screen] = field(default_factory=list)
    navigation: List[NavigationEdge] = field(default_factory=list)
    kind: DocumentKind = field(default=DocumentKind.APP, init=False)

    def screen_ids(self) -> List[str]:
        return [s.id for s in self.screens]

    def validate(self) -> "AppDocument":
        """Raise ValidationError when an edge references an unknown screen."""
        known = set(self.screen_ids())
        for edge in self.navigation:
            for ref in (edge.from_screen, edge.to_screen):
                if ref not in known:
                    raise ValidationError(
                        f"Navigation edge '{edge.trigger}' references unknown screen '{ref}'"
                    )
        return self


Document = Union[FormDocument, PageDocument, DashboardDocument, DecisionDocument, AppDocument]
