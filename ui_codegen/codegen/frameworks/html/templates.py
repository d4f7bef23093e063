"""
Plain HTML templates: markup with a small module script that keeps
``data-bind-*`` attributes in sync with script state.
"""

import html

from ..common import STYLES_TEMPLATE


def html_escape(value):
    return html.escape("" if value is None else str(value), quote=True)


_SCRIPT = """\
{{#if hasScript}}
<script type="module">
{{#each imports}}
  import {{item.name}} from '{{item.source}}';
{{/each}}
{{#each state}}
  let {{item.name}} = {{item.initialValue}};
  const {{item.setter}} = (value) => {
    {{item.name}} = value;
    render();
  };
{{/each}}
{{#each functions}}

  function {{item.name}}({{item.paramList}}) {
{{indent item.body 4}}
  }
{{/each}}

  const scope = () => ({ {{join scopeNames ", "}} });

  function evaluate(expression) {
    const values = scope();
    return new Function(...Object.keys(values), `return (${expression});`)(...Object.values(values));
  }

  function render() {
    document.querySelectorAll('*').forEach((element) => {
      for (const attribute of Array.from(element.attributes)) {
        if (attribute.name === 'data-bind-text') {
          element.textContent = evaluate(attribute.value);
        } else if (attribute.name.startsWith('data-bind-')) {
          element.setAttribute(attribute.name.slice(10), evaluate(attribute.value));
        }
      }
    });
  }

  document.querySelectorAll('*').forEach((element) => {
    for (const attribute of Array.from(element.attributes)) {
      if (attribute.name.startsWith('data-on-')) {
        element.addEventListener(attribute.name.slice(8), (event) => {
          const handler = evaluate(attribute.value);
          if (typeof handler === 'function') {
            handler(event);
          }
        });
      }
    }
  });

  render();
{{#each effects}}

  (() => {
{{indent item.body 4}}
  })();
{{#if item.hasCleanup}}
  window.addEventListener('pagehide', () => {
{{indent item.cleanup 4}}
  });
{{/if}}
{{/each}}
</script>
{{/if}}
"""

COMPONENT_TEMPLATE = (
    """\
{{#if description}}
<!-- {{htmlEscape description}} -->
{{/if}}
{{#if hasStyles}}
<link rel="stylesheet" href="./{{styleFile}}">
{{/if}}
{{markup}}
"""
    + _SCRIPT
)

PAGE_TEMPLATE = (
    """\
<!DOCTYPE html>
<html lang="{{default custom.lang "en"}}">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{{htmlEscape pageTitle}}</title>
{{#if description}}
  <meta name="description" content="{{htmlEscape description}}">
{{/if}}
{{#if hasStyles}}
  <link rel="stylesheet" href="./{{styleFile}}">
{{/if}}
</head>
<body>
{{indent markup 2}}
"""
    + _SCRIPT
    + """\
</body>
</html>
"""
)

INDEX_TEMPLATE = """\
<!DOCTYPE html>
<html lang="{{default custom.lang "en"}}">
<head>
  <meta charset="utf-8">
  <title>{{htmlEscape componentName}}</title>
</head>
<body>
  <ul>
    <li><a href="./{{fileName}}">{{htmlEscape componentName}}</a></li>
  </ul>
</body>
</html>
"""

TEMPLATES = {
    "component": COMPONENT_TEMPLATE,
    "page": PAGE_TEMPLATE,
    "styles": STYLES_TEMPLATE,
    "index": INDEX_TEMPLATE,
}

HELPERS = {
    "htmlEscape": html_escape,
}
