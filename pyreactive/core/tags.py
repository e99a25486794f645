# Built-in tag names recognised by the rendering context. Anything in here is
# rendered as a plain tag element instead of being looked up as a component.
HTML_TAGS = frozenset(
    """
    a abbr address area article aside audio b base bdi bdo big blockquote body
    br button canvas caption cite code col colgroup data datalist dd del details
    dfn dialog div dl dt em embed fieldset figcaption figure footer form h1 h2
    h3 h4 h5 h6 head header hr html i iframe img input ins kbd keygen label
    legend li link main map mark menu menuitem meta meter nav noscript object ol
    optgroup option output p param picture pre progress q rp rt ruby s samp
    script section select small source span strong style sub summary sup table
    tbody td textarea tfoot th thead time title tr track u ul var video wbr
    circle clipPath defs ellipse g image line linearGradient mask path pattern
    polygon polyline radialGradient rect stop svg text tspan
    """.split()
)

# Tags rendered without a closing tag by the static renderer.
VOID_TAGS = frozenset(
    "area base br col embed hr img input keygen link meta param source track wbr".split()
)


def is_builtin_tag(name) -> bool:
    return isinstance(name, str) and name in HTML_TAGS
