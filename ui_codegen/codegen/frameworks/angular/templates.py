"""
Angular templates: standalone components with inline templates.
"""

from ..common import STYLES_TEMPLATE, doc_comment


def template_literal(value, spaces=0):
    """Indent markup and escape it for a backtick template literal."""
    text = "" if value is None else str(value)
    text = text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")
    padding = " " * int(spaces)
    return "\n".join(padding + line if line.strip() else line for line in text.split("\n"))


_CLASS = """\
import { {{join coreImports ", "}} } from '@angular/core';
import { CommonModule } from '@angular/common';
{{#if pageTitle}}
import { Title } from '@angular/platform-browser';
{{/if}}
{{#each imports}}
{{#if item.component}}
import { {{item.name}} } from '{{item.source}}';
{{#else}}
import {{item.name}} from '{{item.source}}';
{{/if}}
{{/each}}

{{docComment description}}
@Component({
  selector: '{{selector}}',
  standalone: true,
  imports: [{{join standaloneImports ", "}}],
  template: `
{{templateLiteral markup 4}}
  `,
{{#if hasStyles}}
  styleUrls: ['./{{styleFile}}'],
{{/if}}
})
export class {{className}}{{#if lifecycle}} implements {{join lifecycle ", "}}{{/if}} {
{{#each props}}
  @Input() {{item.declaration}};
{{/each}}
{{#each state}}
  {{item.name}}: {{item.type}} = {{item.initialValue}};
{{/each}}
{{#if pageTitle}}

  constructor(private readonly title: Title) {}
{{/if}}
{{#if hasInit}}

  ngOnInit(): void {
{{#if pageTitle}}
    this.title.setTitle({{json pageTitle}});
{{/if}}
{{#each effects}}
{{indent item.body 4}}
{{/each}}
  }
{{/if}}
{{#if hasDestroy}}

  ngOnDestroy(): void {
{{#each effects}}
{{indent item.cleanup 4}}
{{/each}}
  }
{{/if}}
{{#each state}}

  {{item.setter}}(value: {{item.type}}): void {
    this.{{item.name}} = value;
  }
{{/each}}
{{#each functions}}

  {{item.name}}({{item.paramList}}): void {
{{indent item.body 4}}
  }
{{/each}}
}
"""

INDEX_TEMPLATE = """\
export { {{className}} } from './{{moduleName}}';
"""

TEMPLATES = {
    "component": _CLASS,
    "page": _CLASS,
    "styles": STYLES_TEMPLATE,
    "index": INDEX_TEMPLATE,
}

HELPERS = {
    "docComment": doc_comment,
    "templateLiteral": template_literal,
}
