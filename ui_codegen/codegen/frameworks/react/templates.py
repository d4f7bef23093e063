"""
React templates: function components with hooks, JSX markup and
optional CSS modules.
"""

from ..common import STYLES_TEMPLATE, doc_comment

_IMPORTS = """\
{{#if hasHooks}}
import { {{join hooks ", "}} } from 'react';
{{/if}}
{{#each imports}}
import {{item.name}} from '{{item.source}}';
{{/each}}
{{#if hasStyles}}
{{#if isModule}}
import styles from './{{styleFile}}';
{{#else}}
import './{{styleFile}}';
{{/if}}
{{/if}}
"""

_BODY = """\
{{#each state}}
  const [{{item.name}}, {{item.setter}}] = useState{{#if typescript}}<{{item.type}}>{{/if}}({{item.initialValue}});
{{/each}}
{{#each effects}}
{{#if item.gap}}

{{/if}}
  useEffect(() => {
{{indent item.body 4}}
{{#if item.hasCleanup}}
    return () => {
{{indent item.cleanup 6}}
    };
{{/if}}
  }, [{{item.depsList}}]);
{{/each}}
{{#each functions}}
{{#if item.gap}}

{{/if}}
  const {{item.name}} = ({{item.paramList}}) => {
{{indent item.body 4}}
  };
{{/each}}
{{#if hasBody}}

{{/if}}
  return (
{{indent jsxContent 4}}
  );
}
"""

COMPONENT_TEMPLATE = (
    _IMPORTS
    + """\

{{#if typescript}}
{{#if hasProps}}
export interface {{componentName}}Props {
{{#each props}}
  {{item.name}}{{#if item.optional}}?{{/if}}: {{item.type}};
{{/each}}
}

{{/if}}
{{/if}}
{{docComment description}}
export default function {{componentName}}({{propsSignature}}) {
"""
    + _BODY
)

PAGE_TEMPLATE = (
    _IMPORTS
    + """\

{{docComment description}}
export default function {{pageName}}() {
{{#if pageTitle}}
  useEffect(() => {
    document.title = {{json pageTitle}};
  }, []);

{{/if}}
"""
    + _BODY
)

INDEX_TEMPLATE = """\
export { default } from './{{moduleName}}';
export { default as {{componentName}} } from './{{moduleName}}';
{{#if typescript}}
{{#if hasProps}}
export type { {{componentName}}Props } from './{{moduleName}}';
{{/if}}
{{/if}}
"""

TEMPLATES = {
    "component": COMPONENT_TEMPLATE,
    "page": PAGE_TEMPLATE,
    "styles": STYLES_TEMPLATE,
    "index": INDEX_TEMPLATE,
}

HELPERS = {
    "docComment": doc_comment,
}
