"""
Static tables for the deterministic slide repair engine.

All tables are immutable; the engine never mutates them.
"""

from types import MappingProxyType

TEXT_BULLETS = 'text-bullets'
METRIC_CARDS = 'metric-cards'
PROCESS_FLOW = 'process-flow'
ICON_GRID = 'icon-grid'
CHART_FRAME = 'chart-frame'
DIAGRAM_SVG = 'diagram-svg'

# Order doubles as the substring-scan priority for noisy type labels
CANONICAL_KINDS = (TEXT_BULLETS, METRIC_CARDS, PROCESS_FLOW, ICON_GRID, CHART_FRAME, DIAGRAM_SVG)

GRID_CAPABLE_KINDS = frozenset({METRIC_CARDS, ICON_GRID})

# Aliases generators emit for each canonical kind (hyphen, underscore and squashed variants).
# Insertion order is the substring-scan order.
COMPONENT_TYPE_SYNONYMS = MappingProxyType({
    # text-bullets
    'text-block': TEXT_BULLETS,
    'text_block': TEXT_BULLETS,
    'textblock': TEXT_BULLETS,
    'text': TEXT_BULLETS,
    'paragraph': TEXT_BULLETS,
    'bullet-list': TEXT_BULLETS,
    'bullet_list': TEXT_BULLETS,
    'bulletlist': TEXT_BULLETS,
    'bullets': TEXT_BULLETS,
    'list': TEXT_BULLETS,
    'content': TEXT_BULLETS,
    'body': TEXT_BULLETS,
    'key-points': TEXT_BULLETS,
    'key_points': TEXT_BULLETS,
    'keypoints': TEXT_BULLETS,
    'visual_list': TEXT_BULLETS,
    'visual-list': TEXT_BULLETS,
    'visuallist': TEXT_BULLETS,

    # metric-cards
    'metrics': METRIC_CARDS,
    'stats': METRIC_CARDS,
    'kpis': METRIC_CARDS,
    'cards': METRIC_CARDS,
    'metric-group': METRIC_CARDS,
    'metric_group': METRIC_CARDS,
    'metricgroup': METRIC_CARDS,
    'stat-cards': METRIC_CARDS,
    'stat_cards': METRIC_CARDS,
    'statcards': METRIC_CARDS,
    'kpi-cards': METRIC_CARDS,
    'kpi_cards': METRIC_CARDS,
    'numbers': METRIC_CARDS,
    'statistics': METRIC_CARDS,
    'data-points': METRIC_CARDS,
    'data_points': METRIC_CARDS,
    'datapoints': METRIC_CARDS,

    # process-flow
    'flow': PROCESS_FLOW,
    'timeline': PROCESS_FLOW,
    'steps': PROCESS_FLOW,
    'process': PROCESS_FLOW,
    'workflow': PROCESS_FLOW,
    'sequence': PROCESS_FLOW,
    'step-flow': PROCESS_FLOW,
    'step_flow': PROCESS_FLOW,
    'stepflow': PROCESS_FLOW,

    # icon-grid
    'icon': ICON_GRID,
    'icons': ICON_GRID,
    'grid': ICON_GRID,
    'features': ICON_GRID,
    'benefits': ICON_GRID,
    'capabilities': ICON_GRID,
    'icon-list': ICON_GRID,
    'icon_list': ICON_GRID,
    'iconlist': ICON_GRID,

    # chart-frame
    'chart': CHART_FRAME,
    'graph': CHART_FRAME,
    'data': CHART_FRAME,
    'visualization': CHART_FRAME,
    'viz': CHART_FRAME,
    'bar-chart': CHART_FRAME,
    'bar_chart': CHART_FRAME,
    'barchart': CHART_FRAME,
    'pie-chart': CHART_FRAME,
    'pie_chart': CHART_FRAME,
    'piechart': CHART_FRAME,
    'line-chart': CHART_FRAME,
    'line_chart': CHART_FRAME,
    'linechart': CHART_FRAME,

    # diagram-svg
    'diagram': DIAGRAM_SVG,
    'infographic': DIAGRAM_SVG,
    'visual-diagram': DIAGRAM_SVG,
    'visual_diagram': DIAGRAM_SVG,
    'visualdiagram': DIAGRAM_SVG,
    'ecosystem-diagram': DIAGRAM_SVG,
    'ecosystem_diagram': DIAGRAM_SVG,
    'ecosystemdiagram': DIAGRAM_SVG,
    'circular-diagram': DIAGRAM_SVG,
    'circular_diagram': DIAGRAM_SVG,
    'circulardiagram': DIAGRAM_SVG,
    'cycle': DIAGRAM_SVG,
    'ecosystem': DIAGRAM_SVG,
})

# Marker that identifies a whole layout plan serialized into a type field
EMBEDDED_LAYOUT_MARKER = 'layoutplan'

# Properties checked, in order, when a component arrives without a usable type
CONTENT_SOURCE_PROPERTIES = ('text', 'body', 'paragraph', 'items', 'value', 'label', 'description')

# Item-list property names accepted per kind; the first one is canonical
ITEM_PROPERTIES = MappingProxyType({
    METRIC_CARDS: ('metrics', 'items', 'cards'),
    PROCESS_FLOW: ('steps', 'items'),
    ICON_GRID: ('items', 'icons', 'features'),
    CHART_FRAME: ('data',),
})

SAFE_ICONS = (
    'Activity', 'Zap', 'BarChart3', 'Box', 'Layers',
    'PieChart', 'TrendingUp', 'Target', 'CheckCircle', 'Lightbulb',
)

PLACEHOLDER_VALUES = frozenset({
    'n/a', 'na', 'tbd', 'unknown', 'none', 'null', 'nil', 'not available',
    '-', '—', '...', 'n.a.',
})

CONTENT_LIMITS = MappingProxyType({
    'title': 70,
    'bullet': 120,
    'metric_value': 10,
    'metric_label': 20,
    'step_title': 15,
    'step_description': 70,
    'icon_label': 20,
    'icon_description': 60,
    'chart_label': 18,
})

LIST_LIMITS = MappingProxyType({
    TEXT_BULLETS: 4,
    METRIC_CARDS: 3,
    PROCESS_FLOW: 4,
    ICON_GRID: 5,
})

MIN_VALID_METRICS = 2

# Absolute floor for the per-line bullet character cap
MIN_BULLET_CHARS = 40
# Bullet character cap once a list reaches DENSE_BULLET_COUNT lines
DENSE_BULLET_CHARS = 55
DENSE_BULLET_COUNT = 3

GARBAGE_MIN_CHARS = 20
GARBAGE_MIN_WORDS = 6
GARBAGE_UNIQUE_RATIO = 0.5
GARBAGE_BULLET_CHARS = 50

# Neutral bullets used when a downgrade finds nothing salvageable on the slide
FALLBACK_BULLETS = MappingProxyType({
    METRIC_CARDS: ('Key focus areas', 'Operational priorities', 'Expected outcomes'),
    ICON_GRID: ('Core capability', 'Primary benefit', 'Key outcome'),
    CHART_FRAME: ('Key data signal', 'Supporting evidence', 'Impact highlight'),
})
FALLBACK_BULLET_LIMIT = 4
FALLBACK_MIN_CHARS = 6
DEFAULT_TEXT_TITLE = 'Key Points'

MAX_SPEAKER_NOTES = 5

LAYOUT_ACTIONS = ('keep', 'simplify', 'shrink_text', 'add_visuals')
DENSITY_STATUSES = ('optimal', 'high', 'overflow')
DEFAULT_READABILITY_SCORE = 8
DEFAULT_SELF_CRITIQUE = MappingProxyType({
    'layoutAction': 'keep',
    'readabilityScore': DEFAULT_READABILITY_SCORE,
    'textDensityStatus': 'optimal',
})
