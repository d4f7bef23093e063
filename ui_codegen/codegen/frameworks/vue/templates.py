"""
Vue templates: single-file components using ``<script setup>``.
"""

from ..common import STYLES_TEMPLATE

_SCRIPT = """\
<script setup{{#if typescript}} lang="ts"{{/if}}>
{{#if hasVueImports}}
import { {{join vueImports ", "}} } from 'vue';
{{/if}}
{{#each imports}}
import {{item.name}} from '{{item.source}}';
{{/each}}
{{#if description}}

{{comment description}}
{{/if}}
{{#if hasProps}}

const props = defineProps({
{{#each props}}
  {{item.name}}: {{item.runtime}},
{{/each}}
});
{{/if}}
{{#if pageTitle}}

document.title = {{json pageTitle}};
{{/if}}
{{#each state}}

const {{item.name}} = ref{{#if typescript}}<{{item.type}}>{{/if}}({{item.initialValue}});
const {{item.setter}} = (value{{#if typescript}}: {{item.type}}{{/if}}) => {
  {{item.name}}.value = value;
};
{{/each}}
{{#each functions}}

const {{item.name}} = ({{item.paramList}}) => {
{{indent item.body 2}}
};
{{/each}}
{{#each effects}}

{{#if item.deps}}
watch([{{item.depsList}}], (_value, _previous, onCleanup) => {
{{indent item.body 2}}
{{#if item.hasCleanup}}
  onCleanup(() => {
{{indent item.cleanup 4}}
  });
{{/if}}
}, { immediate: true });
{{#else}}
onMounted(() => {
{{indent item.body 2}}
});
{{#if item.hasCleanup}}

onUnmounted(() => {
{{indent item.cleanup 2}}
});
{{/if}}
{{/if}}
{{/each}}
</script>
{{#if hasStyles}}

<style{{#if isModule}} module{{#else}} scoped{{/if}} src="./{{styleFile}}"></style>
{{/if}}
"""

COMPONENT_TEMPLATE = (
    """\
<template>
{{indent markup 2}}
</template>

"""
    + _SCRIPT
)

PAGE_TEMPLATE = COMPONENT_TEMPLATE

INDEX_TEMPLATE = """\
export { default } from './{{fileName}}';
export { default as {{componentName}} } from './{{fileName}}';
"""

TEMPLATES = {
    "component": COMPONENT_TEMPLATE,
    "page": PAGE_TEMPLATE,
    "styles": STYLES_TEMPLATE,
    "index": INDEX_TEMPLATE,
}
