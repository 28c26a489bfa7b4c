from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class ModifierScript(BaseModel):
    """A named text transformation.

    ``source`` is Python code that defines ``modify(text) -> str``. It is
    kept as data and only ever evaluated inside the transform sandbox.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    source: str = Field(..., description="Python source defining modify(text)")


UTF8_TO_HEX = ModifierScript(
    name="utf8-to-hex",
    description="Encode the text as UTF-8 and render each byte as uppercase hex",
    source='''
def modify(text):
    return text.encode("utf-8").hex().upper()
''',
)

UPPERCASE = ModifierScript(
    name="uppercase",
    description="Convert the text to upper case",
    source='''
def modify(text):
    return text.upper()
''',
)

LOWERCASE = ModifierScript(
    name="lowercase",
    description="Convert the text to lower case",
    source='''
def modify(text):
    return text.lower()
''',
)

TRIM = ModifierScript(
    name="trim",
    description="Strip leading and trailing whitespace",
    source='''
def modify(text):
    return text.strip()
''',
)

BASE64 = ModifierScript(
    name="base64",
    description="Base64-encode the UTF-8 bytes of the text",
    source='''
import base64

def modify(text):
    return base64.b64encode(text.encode("utf-8")).decode("ascii")
''',
)

BUILTIN_MODIFIERS: Dict[str, ModifierScript] = {
    modifier.name: modifier
    for modifier in (UTF8_TO_HEX, UPPERCASE, LOWERCASE, TRIM, BASE64)
}


def get_modifier(name: str) -> ModifierScript:
    try:
        return BUILTIN_MODIFIERS[name]
    except KeyError:
        raise KeyError(f"Unknown modifier {name!r}") from None
