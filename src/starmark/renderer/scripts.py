"""
JavaScript evaluated inside the rendered page.

The page script only describes nodes; deciding what is interactive and
deduplicating happens in Python.
"""

SCROLL_TO_BOTTOM_JS = """
() => {
    window.scrollTo(0, document.body ? document.body.scrollHeight : 0);
}
"""

# Text is trimmed and capped here so ancestors of large subtrees do not
# ship the whole document text once per node.
COLLECT_PAGE_JS = """
(maxText) => {
    const asString = (value) => (typeof value === 'string' ? value : '');

    const images = Array.from(document.querySelectorAll('img')).map(img => ({
        src: asString(img.src),
        dataSrc: asString(img.getAttribute('data-src')),
    }));

    const nodes = Array.from(document.querySelectorAll('*')).map(el => {
        const attributes = {};
        for (const attr of Array.from(el.attributes || [])) {
            attributes[attr.name] = attr.value;
        }
        let computedCursor = '';
        try {
            computedCursor = getComputedStyle(el).cursor || '';
        } catch (e) {
            computedCursor = '';
        }
        return {
            tag: (el.tagName || '').toLowerCase(),
            attributes: attributes,
            text: (el.textContent || '').trim().substring(0, maxText),
            id: asString(el.id),
            className: asString(el.className),
            value: asString(el.value),
            name: asString(el.name),
            placeholder: asString(el.placeholder),
            inlineCursor: el.style ? asString(el.style.cursor) : '',
            computedCursor: computedCursor,
        };
    });

    return { images: images, nodes: nodes };
}
"""

MAX_NODE_TEXT = 200
