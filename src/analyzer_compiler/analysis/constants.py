"""Node and property names used by analyzer definitions."""

ANL_DEFAULT = "default"
ANL_CLASS = "class"
ANL_NAME = "name"
ANL_TOKENIZER = "tokenizer"
ANL_FILTERS = "filters"
ANL_CHAR_FILTERS = "charFilters"

JCR_PRIMARYTYPE = "jcr:primaryType"
JCR_CONTENT = "jcr:content"
JCR_DATA = "jcr:data"

ANALYZER_TYPE = "type"
CUSTOM_ANALYZER_TYPE = "custom"
DEFAULT_TOKENIZER_ID = "custom_tokenizer"

# Never copied into an argument map.
IGNORE_PROP_NAMES = frozenset({ANL_CLASS, ANL_NAME, JCR_PRIMARYTYPE})

# Child slots of a composed analyzer; skipped when collecting built-in content.
STRUCTURAL_CHILDREN = frozenset({ANL_TOKENIZER, ANL_FILTERS, ANL_CHAR_FILTERS})
