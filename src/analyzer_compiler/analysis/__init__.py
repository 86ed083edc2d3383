"""
Analyzer configuration compiler.

- normalizer: component name normalization
- content: content block (word list) loading
- identity: component identity registries and key remap rules
- properties: node property to argument map translation
- output: settings registry returned to callers
- compiler: built-in / composed analyzer resolution
"""
