"""Per-category leaf transformers.

Each transformer turns a classified node into a small dict of cosmetic
properties (text, variant style, states, ...). The mapping Category →
transformer is built once by ``build_transformers`` and handed to the
assembler explicitly; there is no global registration step.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from .classifier import Category
from .nodes import DocumentNode, coerce_number, round_half_up

Transformer = Callable[[DocumentNode], Dict[str, Any]]
TransformerMap = Dict[Category, Transformer]

DEFAULT_PLACEHOLDER = "Type here"


# =====================================================================
# Shared helpers
# =====================================================================


def extract_text(node: DocumentNode) -> Optional[str]:
    """First non-empty text found in the node or its subtree (pre-order)."""
    if node.text:
        return node.text
    for child in node.iter_descendants():
        if child.text:
            return child.text
    return None


def _component_properties(node: DocumentNode) -> Dict[str, str]:
    """Flatten Figma ``componentProperties`` into lower-case name → value.

    Figma keys look like ``"State#1234:0"``; the suffix after ``#`` is dropped.
    """
    props = node.raw.get("componentProperties") or {}
    if not isinstance(props, Mapping):
        return {}
    out: Dict[str, str] = {}
    for key, value in props.items():
        name = str(key).split("#", 1)[0].strip().lower()
        if isinstance(value, Mapping):
            value = value.get("value")
        if value is not None:
            out[name] = str(value)
    return out


def _is_true(props: Dict[str, str], key: str) -> bool:
    return props.get(key, "").lower() == "true"


def _rgba(color: Mapping[str, Any], opacity: Any) -> Dict[str, Any]:
    # Malformed channels become 0 instead of aborting the run
    return {
        "r": round_half_up(coerce_number(color.get("r", 0)) * 255),
        "g": round_half_up(coerce_number(color.get("g", 0)) * 255),
        "b": round_half_up(coerce_number(color.get("b", 0)) * 255),
        "a": opacity if opacity is not None else 1,
    }


def extract_color_info(node: DocumentNode) -> Optional[Dict[str, Any]]:
    """Main fill (solid or linear gradient), else first visible solid stroke."""
    if not node.has_fills and not node.has_strokes:
        return None
    visible_fills = [f for f in node.paints("fills") if f.get("visible") is not False]
    if visible_fills:
        fill = visible_fills[0]
        if fill.get("type") == "SOLID" and isinstance(fill.get("color"), Mapping):
            return {"type": "solid", "color": _rgba(fill["color"], fill.get("opacity"))}
        if fill.get("type") == "GRADIENT_LINEAR":
            return {
                "type": "gradient",
                "gradientType": "linear",
                "stops": fill.get("gradientStops") or [],
            }

    for stroke in node.paints("strokes"):
        if stroke.get("visible") is False:
            continue
        if stroke.get("type") == "SOLID" and isinstance(stroke.get("color"), Mapping):
            return {
                "type": "border",
                "color": _rgba(stroke["color"], stroke.get("opacity")),
                "width": node.raw.get("strokeWeight") or 1,
            }
        break
    return None


def _text_style_of(style: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "fontFamily": style.get("fontFamily") or "default",
        "fontSize": style.get("fontSize") or 16,
        "fontWeight": style.get("fontWeight") or "regular",
        "textAlign": style.get("textAlignHorizontal") or "left",
        "lineHeight": style.get("lineHeightPx") or "normal",
    }


def extract_text_style(node: DocumentNode) -> Optional[Dict[str, Any]]:
    """Text style of a TEXT node, or of the first direct TEXT child."""
    if node.kind == "TEXT":
        style = node.raw.get("style")
        return _text_style_of(style) if isinstance(style, Mapping) else None
    for child in node.children:
        if child.kind == "TEXT":
            style = child.raw.get("style")
            if isinstance(style, Mapping):
                return _text_style_of(style)
            return None
    return None


def extract_effects(node: DocumentNode) -> Optional[List[Dict[str, Any]]]:
    effects = []
    for effect in node.paints("effects"):
        if effect.get("visible") is False:
            continue
        effect_type = effect.get("type")
        if effect_type in ("DROP_SHADOW", "INNER_SHADOW"):
            offset = effect.get("offset")
            if not isinstance(offset, Mapping):
                offset = {}
            effects.append({
                "type": "shadow" if effect_type == "DROP_SHADOW" else "innerShadow",
                "color": effect.get("color"),
                "offset": {"x": offset.get("x", 0), "y": offset.get("y", 0)},
                "radius": effect.get("radius", 0),
                "spread": effect.get("spread") or 0,
            })
        elif effect_type == "LAYER_BLUR":
            effects.append({"type": "blur", "radius": effect.get("radius", 0)})
    return effects or None


def extract_corner_radius(node: DocumentNode) -> Optional[Dict[str, Any]]:
    if node.corner_radius is not None:
        return {"radius": node.corner_radius}
    corners = ("topLeftRadius", "topRightRadius", "bottomLeftRadius", "bottomRightRadius")
    if any(key in node.raw for key in corners):
        return {
            "topLeft": node.raw.get("topLeftRadius") or 0,
            "topRight": node.raw.get("topRightRadius") or 0,
            "bottomLeft": node.raw.get("bottomLeftRadius") or 0,
            "bottomRight": node.raw.get("bottomRightRadius") or 0,
        }
    return None


def extract_opacity(node: DocumentNode) -> Optional[float]:
    """Layer opacity, only when the node is actually translucent."""
    if node.opacity is not None and node.opacity < 1:
        return node.opacity
    return None


def extract_style(node: DocumentNode) -> Dict[str, Any]:
    style = {
        "colors": extract_color_info(node),
        "textStyle": extract_text_style(node),
        "effects": extract_effects(node),
        "cornerRadius": extract_corner_radius(node),
        "opacity": extract_opacity(node),
    }
    return {k: v for k, v in style.items() if v is not None}


# =====================================================================
# Category transformers
# =====================================================================


def button_transformer(node: DocumentNode) -> Dict[str, Any]:
    props: Dict[str, Any] = {"text": extract_text(node), "variant": "primary", "states": {}}
    variants = _component_properties(node)
    if variants.get("style"):
        props["variant"] = variants["style"].lower()
    if _is_true(variants, "disabled"):
        props["states"]["disabled"] = True
    if variants.get("state"):
        props["states"][variants["state"].lower()] = True
    if _is_true(variants, "hasicon"):
        props["hasIcon"] = True
    return props


def header_transformer(node: DocumentNode) -> Dict[str, Any]:
    props: Dict[str, Any] = {
        "title": extract_text(node) or node.name,
        "hasBackButton": False,
        "hasCloseButton": False,
    }
    for child in node.children:
        child_name = child.lower_name
        if "back" in child_name:
            props["hasBackButton"] = True
        if "close" in child_name:
            props["hasCloseButton"] = True
    return props


def input_transformer(node: DocumentNode) -> Dict[str, Any]:
    props: Dict[str, Any] = {
        "placeholder": extract_text(node) or DEFAULT_PLACEHOLDER,
        "type": "text",
        "states": {},
    }
    variants = _component_properties(node)
    if variants.get("type", "").lower() == "password":
        props["type"] = "password"
    for key, state in (("disabled", "disabled"), ("focus", "focused"), ("error", "error")):
        if _is_true(variants, key):
            props["states"][state] = True
    return props


# Onboarding input type variant → (html input type, validation rule)
_ONBOARDING_TYPES = {
    "email": ("email", "email"),
    "password": ("password", None),
    "number": ("number", None),
    "phone": ("tel", "phone"),
}

_ONBOARDING_STATES = {"error": "error", "disabled": "disabled", "focus": "focused"}


def onboarding_input_transformer(node: DocumentNode) -> Dict[str, Any]:
    props: Dict[str, Any] = {
        "placeholder": DEFAULT_PLACEHOLDER,
        "label": "",
        "type": "text",
        "validation": None,
        "states": {},
    }
    for child in node.children:
        child_name = child.lower_name
        if "label" in child_name or "title" in child_name:
            props["label"] = extract_text(child) or child.name
        if "placeholder" in child_name or "input" in child_name:
            props["placeholder"] = extract_text(child) or DEFAULT_PLACEHOLDER

    variants = _component_properties(node)
    input_type = variants.get("type", "").lower()
    if input_type in _ONBOARDING_TYPES:
        props["type"], props["validation"] = _ONBOARDING_TYPES[input_type]
    state = _ONBOARDING_STATES.get(variants.get("state", "").lower())
    if state:
        props["states"][state] = True
    return props


def keyboard_transformer(node: DocumentNode) -> Dict[str, Any]:
    special = ("special", "emoji", "symbol")
    return {
        "keyboardType": "numeric" if "numeric" in node.lower_name else "alphabetic",
        "hasSpecialKeys": any(
            any(marker in child.lower_name for marker in special)
            for child in node.children
        ),
    }


def text_transformer(node: DocumentNode) -> Dict[str, Any]:
    style = node.raw.get("style") or {}
    return {
        "text": extract_text(node),
        "truncate": isinstance(style, Mapping) and style.get("textTruncation") == "ENDING",
    }


_ICON_WORDS = re.compile(r"icon|ícone", re.IGNORECASE)


def icon_transformer(node: DocumentNode) -> Dict[str, Any]:
    return {
        "name": _ICON_WORDS.sub("", node.name).strip(),
        "isVector": node.kind == "VECTOR",
    }


def default_transformer(node: DocumentNode) -> Dict[str, Any]:
    text = extract_text(node)
    return {"text": text} if text else {}


def build_transformers() -> TransformerMap:
    """Build the Category → transformer mapping."""
    return {
        Category.BUTTON: button_transformer,
        Category.HEADER: header_transformer,
        Category.INPUT: input_transformer,
        Category.ONBOARDING_INPUT: onboarding_input_transformer,
        Category.KEYBOARD: keyboard_transformer,
        Category.TEXT: text_transformer,
        Category.ICON: icon_transformer,
    }


def apply_transformer(
    node: DocumentNode,
    category: Category,
    transformers: TransformerMap,
) -> Dict[str, Any]:
    """Run the category's transformer (default when unmapped) plus shared style."""
    transformer = transformers.get(category, default_transformer)
    props = dict(transformer(node))
    style = extract_style(node)
    if style:
        props["style"] = style
    return props
