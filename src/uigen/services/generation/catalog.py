"""Toolkit catalog
===============

Names of the primitives exported by ``@fragment_ui/ui`` and the composite
blocks exported by ``@fragment_ui/blocks``. The synthesizer and the repair
pass consult these lists to decide what to import and where; the toolkit
itself is an external package.
"""

import re
from types import MappingProxyType
from typing import FrozenSet, Mapping, Tuple

PRIMITIVES: Tuple[str, ...] = (
    # Form & input
    "Button", "Input", "Textarea", "Select", "SelectTrigger", "SelectValue", "SelectContent", "SelectItem",
    "Checkbox", "RadioGroup", "Radio", "Switch", "DatePicker", "FileUpload", "Slider", "Rating",
    "ColorPicker", "TagInput", "Calendar", "MultiSelect", "Combobox", "CommandPalette",
    # Card
    "Card", "CardHeader", "CardTitle", "CardDescription", "CardContent", "CardFooter",
    # Table
    "Table", "TableHeader", "TableBody", "TableRow", "TableHead", "TableCell", "VirtualTable",
    # Tabs
    "Tabs", "TabsList", "TabsTrigger", "TabsContent",
    # Dialog & overlays
    "Dialog", "DialogTrigger", "DialogContent", "DialogHeader", "DialogTitle", "DialogDescription",
    "DialogFooter", "Popover", "Tooltip", "Alert", "Sheet", "HoverCard",
    # Display
    "Accordion", "Avatar", "Badge", "Breadcrumbs", "Carousel", "Progress", "Spinner", "Skeleton",
    "Separator", "Stepper", "Timeline", "AspectRatio",
    # Navigation & layout
    "Pagination", "NavigationMenu", "NavigationMenuList", "NavigationMenuItem", "NavigationMenuTrigger",
    "Menubar", "Sidebar", "Resizable", "Collapsible", "ContextMenu",
    "DropdownMenu", "DropdownMenuTrigger", "DropdownMenuContent", "DropdownMenuItem",
    "DropdownMenuLabel", "DropdownMenuSeparator", "ScrollArea", "SegmentedControl",
    # Advanced
    "TreeView", "VirtualList", "SplitButton", "Toggle", "ToggleGroup", "Kbd",
    # Form utilities
    "FormField", "validateValue", "ValidationRules", "validators", "toast", "Toaster",
)

BLOCKS: Tuple[str, ...] = (
    "SettingsScreen", "DashboardLayout", "DataTable", "FormContainer", "CardGrid",
    "NavigationHeader", "PricingTable", "AuthenticationBlock",
    # Decision blocks
    "Compare3", "Recommendation", "Tradeoffs", "ReviewConfirm",
)

PRIMITIVE_SET: FrozenSet[str] = frozenset(PRIMITIVES)
BLOCK_SET: FrozenSet[str] = frozenset(BLOCKS)

# Identifiers referenced as values rather than JSX tags
FUNCTION_IMPORTS: Tuple[str, ...] = ("toast", "validateValue", "validators")

# Names that look plausible but are not exported by the toolkit
COMPONENT_RENAMES: Mapping[str, str] = MappingProxyType({
    "Dropdown": "DropdownMenu",
    "DropdownTrigger": "DropdownMenuTrigger",
    "DropdownContent": "DropdownMenuContent",
    "DropdownItem": "DropdownMenuItem",
    "DropdownLabel": "DropdownMenuLabel",
    "DropdownSeparator": "DropdownMenuSeparator",
})

# Non-existent components replaced by a plain HTML element
HTML_REPLACEMENTS: Mapping[str, str] = MappingProxyType({
    "CardImage": "img",
})

# Lower-case tags that are not valid HTML and what they should become
INVALID_HTML_TAGS: Mapping[str, str] = MappingProxyType({
    "navigation": "nav",
    "grid": "div",
    "card": "Card",
})

# Components that receive a generated data-ui-id, longest names first so
# ``DialogTrigger`` is handled before ``Dialog``
UI_ID_COMPONENTS: Tuple[str, ...] = tuple(sorted(
    {name for name in PRIMITIVES + BLOCKS if name[0].isupper() and name != "ValidationRules"}
    | {"Form"},
    key=lambda n: (-len(n), n),
))

_KEBAB_RE = re.compile(r'(?<!^)([A-Z])')


def kebab_case(name: str) -> str:
    """``DialogTrigger`` -> ``dialog-trigger``."""
    return _KEBAB_RE.sub(r'-\1', name).lower()


def module_for(name: str) -> str:
    """Return 'blocks' for composite blocks, 'ui' for primitives, '' otherwise."""
    if name in BLOCK_SET:
        return "blocks"
    if name in PRIMITIVE_SET:
        return "ui"
    return ""


def render_import_statement(names, module: str) -> str:
    """Multi-line named import, one identifier per line, sorted."""
    body = ",\n  ".join(sorted(set(names)))
    return f'import {{\n  {body}\n}} from "{module}";'
