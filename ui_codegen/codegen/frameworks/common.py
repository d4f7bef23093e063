"""
Pieces shared by the framework generators.
"""

# Plain stylesheet; every framework writes its styles as a separate file
STYLES_TEMPLATE = """\
{{#each styles}}
{{item.selector}} {
{{#each item.declarations}}
  {{item.property}}: {{item.value}};
{{/each}}
}

{{/each}}
"""


def doc_comment(text, indent=0):
    """JSDoc block for a description; empty text gives nothing."""
    if not text:
        return ""
    padding = " " * int(indent)
    lines = [f"{padding}/**"]
    lines.extend(f"{padding} * {line}".rstrip() for line in str(text).split("\n"))
    lines.append(f"{padding} */")
    return "\n".join(lines)


def script_extension(typescript: bool) -> str:
    return "ts" if typescript else "js"


def style_filename(base: str, is_module: bool) -> str:
    return f"{base}.module.css" if is_module else f"{base}.css"
