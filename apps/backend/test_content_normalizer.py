"""
Tests for per-kind content repair, fallback synthesis and top-level field repair.
"""

import pytest

from slide_repair.repair.constants import FALLBACK_BULLETS, SAFE_ICONS
from slide_repair.repair.content_normalizer import (
    coerce_item,
    fallback_bullets,
    repair_chart_frame,
    repair_component_content,
    repair_icon_grid,
    repair_metric_cards,
    repair_process_flow,
    repair_self_critique,
    repair_speaker_notes,
    repair_text_bullets,
    repair_top_level_fields,
)
from slide_repair.repair.state import RepairState
from slide_repair.repair.warning_log import WarningLog


def _state(components, variant='standard-vertical', density=None, title='Quarterly Review', **slide_fields):
    router_config = {'layoutVariant': variant}
    if density is not None:
        router_config['densityBudget'] = density
    slide = {
        'title': title,
        'routerConfig': router_config,
        'layoutPlan': {'title': title, 'components': components},
    }
    slide.update(slide_fields)
    state = RepairState.from_slide(slide)
    state.components = components
    return state


class TestCoerceItem:

    def test_object_passes_through(self):
        item = {'value': '1', 'label': 'One'}
        assert coerce_item(item, 0, 'metric') is item

    def test_json_object_string_is_parsed(self):
        assert coerce_item('{"value": "42%", "label": "Growth"}', 0, 'metric') == {'value': '42%', 'label': 'Growth'}

    def test_metric_from_string(self):
        assert coerce_item('42%', 1, 'metric') == {'value': '42%', 'label': 'Metric 2', 'icon': None}
        assert coerce_item('A very long metric description', 0, 'metric')['value'] == 'A very lon'

    def test_step_from_string(self):
        assert coerce_item('Short step', 0, 'step') == {
            'number': 1, 'title': 'Short step', 'description': '', 'icon': None
        }
        long_text = 'Interview twenty customers about onboarding'
        step = coerce_item(long_text, 2, 'step')
        assert step['number'] == 3
        assert step['title'] == long_text[:30]
        assert step['description'] == long_text

    def test_generic_from_string(self):
        assert coerce_item('Fast', 0, 'item') == {'label': 'Fast', 'icon': None}
        assert coerce_item('x' * 50, 0, 'item')['label'] == 'x' * 40

    def test_other_values_are_wrapped(self):
        assert coerce_item(7, 2, 'item') == {'label': 'Item 3', 'value': '7', 'icon': None}
        assert coerce_item(['a'], 0, 'metric') == {'label': 'Item 1', 'value': '["a"]', 'icon': None}


class TestMetricCards:

    def test_synonym_items_become_metrics(self):
        component = {'type': 'metric-cards', 'items': ['42%', 'Growth']}
        state = _state([component])

        repair_metric_cards(component, state)

        assert component['type'] == 'metric-cards'
        assert 'items' not in component
        assert component['metrics'] == [
            {'value': '42%', 'label': 'Metric 1', 'icon': SAFE_ICONS[0]},
            {'value': 'Growth', 'label': 'Metric 2', 'icon': SAFE_ICONS[1]},
        ]

    def test_placeholders_dropped_and_icons_fixed(self):
        component = {'type': 'metric-cards', 'metrics': [
            {'value': '42%', 'label': 'Growth', 'icon': 'zap'},
            {'value': 'N/A', 'label': 'Churn'},
            {'value': '$3M', 'label': 'Revenue', 'icon': 'Rocket'},
        ]}
        state = _state([component])

        repair_metric_cards(component, state)

        assert component['metrics'] == [
            {'value': '42%', 'label': 'Growth', 'icon': 'Zap'},
            {'value': '$3M', 'label': 'Revenue', 'icon': SAFE_ICONS[2]},
        ]
        assert 'Dropped 1 placeholder or empty metrics' in state.log

    def test_garbage_label_replaced(self):
        component = {'type': 'metric-cards', 'metrics': [
            {'value': '10x', 'label': 'go go go go go go go go'},
            {'value': '5', 'label': 'Teams'},
        ]}
        repair_metric_cards(component, _state([component]))
        assert component['metrics'][0]['label'] == 'Metric 1'

    def test_value_and_label_truncated(self):
        component = {'type': 'metric-cards', 'metrics': [
            {'value': '1,234,567,890 USD', 'label': 'Total addressable market size'},
            {'value': 12, 'label': 'Markets'},
        ]}
        state = _state([component])

        repair_metric_cards(component, state)

        first, second = component['metrics']
        assert first['value'] == '1,234,567…'
        assert len(first['label']) == 20 and first['label'].endswith('…')
        assert second['value'] == '12'
        assert 'Auto-trimmed metric value to 10 chars' in state.log

    def test_list_capped_to_three(self):
        component = {'type': 'metric-cards', 'metrics': ['1', '2', '3', '4', '5']}
        state = _state([component])

        repair_metric_cards(component, state)

        assert [m['value'] for m in component['metrics']] == ['1', '2', '3']
        assert 'Auto-trimmed metric cards to 3 items' in state.log

    def test_json_string_list_is_parsed(self):
        component = {'type': 'metric-cards', 'metrics': '[{"value": "9", "label": "Regions"}, "17x"]'}
        repair_metric_cards(component, _state([component]))
        assert [m['label'] for m in component['metrics']] == ['Regions', 'Metric 2']

    def test_single_placeholder_downgrades_with_slide_content(self):
        component = {'type': 'metric-cards', 'metrics': [{'value': 'N/A', 'label': 'Revenue'}]}
        state = _state([component], content=['Revenue grew 15% year over year', 'Churn fell to 3%'])

        repair_metric_cards(component, state)

        assert component == {
            'type': 'text-bullets',
            'title': 'Key Points',
            'content': ['Revenue grew 15% year over year', 'Churn fell to 3%'],
        }
        assert 'Converted metric-cards to text-bullets: insufficient valid metrics' in state.log

    def test_empty_metrics_downgrade_to_neutral_bullets(self):
        component = {'type': 'metric-cards', 'title': 'KPIs'}
        state = _state([component], title=None)

        repair_metric_cards(component, state)

        assert component['type'] == 'text-bullets'
        assert component['title'] == 'KPIs'
        assert component['content'] == list(FALLBACK_BULLETS['metric-cards'])
        assert 'Converted metric-cards to text-bullets: no metrics available' in state.log

    def test_density_budget_below_two_downgrades(self):
        component = {'type': 'metric-cards', 'metrics': ['1', '2', '3']}
        state = _state([component], density={'maxItems': 1}, speakerNotesLines=['Slide: Walk through the numbers'])

        repair_metric_cards(component, state)

        assert component['type'] == 'text-bullets'
        assert component['content'] == ['Walk through the numbers']
        assert 'Converted metric-cards to text-bullets: density budget allows fewer than 2 metrics' in state.log

    def test_density_budget_caps_metrics(self):
        component = {'type': 'metric-cards', 'metrics': ['1', '2', '3']}
        repair_metric_cards(component, _state([component], density={'maxItems': 2}))
        assert len(component['metrics']) == 2


class TestProcessFlow:

    def test_steps_coerced_numbered_and_iconed(self):
        component = {'type': 'process-flow', 'items': [
            'Discover',
            {'title': 'Build', 'description': 'x' * 100, 'icon': 'layers'},
            {'title': 'Ship', 'number': '7'},
            {'title': 'Learn', 'number': 0},
        ]}
        state = _state([component])

        repair_process_flow(component, state)

        steps = component['steps']
        assert 'items' not in component
        assert [s['number'] for s in steps] == [1, 2, 7, 4]
        assert [s['icon'] for s in steps] == [SAFE_ICONS[0], 'Layers', SAFE_ICONS[2], SAFE_ICONS[3]]
        assert steps[1]['description'] == 'x' * 69 + '…'

    def test_garbage_title_replaced_and_long_title_trimmed(self):
        component = {'type': 'process-flow', 'steps': [
            {'title': 'plan plan plan plan plan plan'},
            {'title': 'Negotiate contracts'},
        ]}
        repair_process_flow(component, _state([component]))
        assert component['steps'][0]['title'] == 'Step 1'
        assert component['steps'][1]['title'] == 'Negotiate cont…'

    def test_empty_steps_are_tolerated(self):
        component = {'type': 'process-flow'}
        repair_process_flow(component, _state([component]))
        assert component == {'type': 'process-flow', 'steps': []}

    def test_steps_capped(self):
        component = {'type': 'process-flow', 'steps': ['a', 'b', 'c', 'd', 'e', 'f']}
        state = _state([component])
        repair_process_flow(component, state)
        assert len(component['steps']) == 4
        assert 'Auto-trimmed process steps to 4 items' in state.log


class TestIconGrid:

    def test_labels_guaranteed(self):
        component = {'type': 'icon-grid', 'features': [
            {'label': None, 'icon': 'target'},
            {'label': 'Secure by default for every single tenant'},
            'Fast',
        ]}
        state = _state([component])

        repair_icon_grid(component, state)

        items = component['items']
        assert 'features' not in component
        assert items[0] == {'label': 'Feature 1', 'icon': 'Target'}
        assert items[1]['label'] == 'Secure by default f…'
        assert items[2] == {'label': 'Fast', 'icon': SAFE_ICONS[2]}

    def test_empty_grid_downgrades(self):
        component = {'type': 'icon-grid', 'items': []}
        state = _state([component], title=None)

        repair_icon_grid(component, state)

        assert component['type'] == 'text-bullets'
        assert component['content'] == list(FALLBACK_BULLETS['icon-grid'])
        assert 'items' not in component

    def test_capped_to_five(self):
        component = {'type': 'icon-grid', 'items': [str(i) * 3 for i in range(7)]}
        repair_icon_grid(component, _state([component]))
        assert len(component['items']) == 5


class TestChartFrame:

    def test_entries_coerced_and_invalid_dropped(self):
        component = {'type': 'chart-frame', 'data': [
            {'label': 'Q1', 'value': 10},
            {'label': 'Q2', 'value': 'n/a'},
            '{"label": "Q3", "value": 30}',
            'Q4',
            {'label': 'Q5', 'value': True},
        ]}
        state = _state([component])

        repair_chart_frame(component, state)

        assert component['data'] == [
            {'label': 'Q1', 'value': 10},
            {'label': 'Q3', 'value': 30},
            {'label': 'Q4', 'value': 40},
        ]
        assert 'Dropped 2 chart points without numeric values' in state.log

    def test_json_string_data_and_label_trim(self):
        component = {'type': 'chart-frame', 'data': '[{"label": "Enterprise customers", "value": 1.5}]'}
        repair_chart_frame(component, _state([component]))
        assert component['data'] == [{'label': 'Enterprise custom…', 'value': 1.5}]

    def test_empty_data_downgrades(self):
        component = {'type': 'chart-frame', 'title': 'Data Visualization', 'data': []}
        state = _state([component], title=None)

        repair_chart_frame(component, state)

        assert component['type'] == 'text-bullets'
        assert component['content'] == list(FALLBACK_BULLETS['chart-frame'])
        assert 'data' not in component
        assert 'Converted chart-frame to text-bullets: no data available' in state.log


class TestTextBullets:

    def test_duplicates_removed_case_insensitively(self):
        component = {'type': 'text-bullets', 'content': ['Alpha point', 'alpha point ', 'Beta', '', None]}
        state = _state([component])

        repair_text_bullets(component, state)

        assert component['content'] == ['Alpha point', 'Beta']
        assert 'Removed 1 duplicate bullet lines' in state.log

    def test_string_and_missing_content(self):
        single = {'type': 'text-bullets', 'content': 'Single line'}
        missing = {'type': 'text-bullets'}
        state = _state([single, missing])

        repair_text_bullets(single, state)
        repair_text_bullets(missing, state)

        assert single['content'] == ['Single line']
        assert missing['content'] == []

    def test_long_line_truncated_to_variant_cap(self):
        component = {'type': 'text-bullets', 'title': 'T' * 80, 'content': ['x' * 100]}
        state = _state([component])

        repair_text_bullets(component, state)

        assert component['content'] == ['x' * 69 + '…']
        assert len(component['title']) == 70
        assert 'Auto-trimmed bullet text to 70 chars' in state.log

    def test_dense_list_uses_tighter_cap(self):
        component = {'type': 'text-bullets', 'content': [str(i) * 60 for i in range(3)]}
        repair_text_bullets(component, _state([component]))
        assert all(len(line) == 55 for line in component['content'])

    def test_density_budget_floor(self):
        component = {'type': 'text-bullets', 'content': ['y' * 60]}
        repair_text_bullets(component, _state([component], density={'maxItems': 4, 'maxChars': 100}))
        assert component['content'] == ['y' * 39 + '…']

    @pytest.mark.parametrize('variant, expected', [
        ('standard-vertical', 4),
        ('hero-centered', 2),
        ('timeline-horizontal', 3),
        ('asymmetric-grid', 3),
    ])
    def test_line_count_capped_per_variant(self, variant, expected):
        component = {'type': 'text-bullets', 'content': [f"Point number {i}" for i in range(6)]}
        repair_text_bullets(component, _state([component], variant=variant))
        assert len(component['content']) == expected

    def test_garbage_line_marked_once(self):
        garbage = ' '.join(['data'] * 10)
        component = {'type': 'text-bullets', 'content': [garbage]}
        state = _state([component])

        repair_text_bullets(component, state)
        first = list(component['content'])
        repair_text_bullets(component, state)

        assert first == [garbage + '...']
        assert component['content'] == first

    def test_non_string_lines_stringified(self):
        component = {'type': 'text-bullets', 'content': [42, {'a': 1}, True]}
        repair_text_bullets(component, _state([component]))
        assert component['content'] == ['42', '{"a":1}', 'true']


def test_repair_component_content_dispatches_by_kind():
    components = [
        {'type': 'metric-cards', 'metrics': ['1', '2']},
        {'type': 'diagram-svg', 'svg': '<svg/>'},
        {'type': 'text-bullets', 'content': 'Hello'},
    ]
    state = repair_component_content(_state(components))

    assert len(state.components[0]['metrics']) == 2
    assert state.components[1] == {'type': 'diagram-svg', 'svg': '<svg/>'}
    assert state.components[2]['content'] == ['Hello']


class TestFallbackBullets:

    def test_sources_in_order_and_title_dropped(self):
        slide = {
            'title': 'Market Entry',
            'content': ['Enter two markets', 'enter two markets', 'Hire'],
            'speakerNotesLines': ['Slide: Focus on Germany first', 'Then expand to France', 'Third note'],
            'layoutPlan': {'title': 'Market Entry'},
        }
        assert fallback_bullets(slide) == ['Enter two markets', 'Focus on Germany first', 'Then expand to France']

    def test_title_kept_when_alone(self):
        assert fallback_bullets({'title': 'Market Entry'}) == ['Market Entry']

    def test_limited_to_four(self):
        slide = {'content': [f"Bullet line {i}" for i in range(6)]}
        assert len(fallback_bullets(slide)) == 4

    def test_nothing_salvageable(self):
        assert fallback_bullets({'content': ['tiny'], 'title': ''}) == []


class TestSelfCritique:

    @pytest.mark.parametrize('action, expected', [
        ('We should simplify the layout', 'simplify'),
        ('Shrink text a bit', 'shrink_text'),
        ('reduce density', 'shrink_text'),
        ('Add more visuals', 'add_visuals'),
        ('keep', 'keep'),
        ('KEEP', 'keep'),
        ('Leave as is', 'keep'),
        (None, 'keep'),
        (3, 'keep'),
    ])
    def test_layout_action(self, action, expected):
        slide = {'selfCritique': {'layoutAction': action}}
        repair_self_critique(slide, WarningLog())
        assert slide['selfCritique']['layoutAction'] == expected

    @pytest.mark.parametrize('status, expected', [
        ('Too DENSE', 'high'),
        ('high', 'high'),
        ('overflowing', 'overflow'),
        ('optimal', 'optimal'),
        ('fine', 'optimal'),
        (None, 'optimal'),
    ])
    def test_density_status(self, status, expected):
        slide = {'selfCritique': {'textDensityStatus': status}}
        repair_self_critique(slide, WarningLog())
        assert slide['selfCritique']['textDensityStatus'] == expected

    @pytest.mark.parametrize('score, expected', [(7.5, 7.5), (0, 0), (10, 10), (14, 8), (-1, 8), ('9', 8), (None, 8)])
    def test_readability_score(self, score, expected):
        slide = {'selfCritique': {'readabilityScore': score}}
        repair_self_critique(slide, WarningLog())
        assert slide['selfCritique']['readabilityScore'] == expected

    def test_string_critique_replaced(self):
        slide = {'selfCritique': 'Looks great'}
        log = WarningLog()

        repair_self_critique(slide, log)

        assert slide['selfCritique'] == {'layoutAction': 'keep', 'readabilityScore': 8, 'textDensityStatus': 'optimal'}
        assert 'Replaced malformed selfCritique with defaults' in log

    def test_missing_critique_left_alone(self):
        slide = {}
        repair_self_critique(slide, WarningLog())
        assert 'selfCritique' not in slide


class TestSpeakerNotes:

    def test_missing_notes_synthesized(self):
        slide = {'title': 'Quarterly Review'}
        log = WarningLog()

        repair_speaker_notes(slide, log)

        assert slide['speakerNotesLines'] == ['Slide: Quarterly Review']
        assert 'Generated default speaker notes' in log

    def test_untitled_fallback(self):
        slide = {'speakerNotesLines': ['', 3, '   ']}
        repair_speaker_notes(slide, WarningLog())
        assert slide['speakerNotesLines'] == ['Slide: Content']

    def test_notes_filtered_and_capped(self):
        slide = {'speakerNotesLines': [f"Note {i}" for i in range(7)] + [None]}
        log = WarningLog()

        repair_speaker_notes(slide, log)

        assert slide['speakerNotesLines'] == [f"Note {i}" for i in range(5)]
        assert 'Auto-trimmed speaker notes to 5 items' in log


def test_top_level_fields_sanitize_router_config():
    state = _state([], density={'maxItems': 'three', 'maxChars': 300})
    state.slide['selfCritique'] = 'ok'

    repair_top_level_fields(state)

    assert state.slide['routerConfig']['densityBudget'] == {'maxChars': 300}
    assert 'Removed non-numeric densityBudget.maxItems' in state.log
    assert state.slide['speakerNotesLines'] == ['Slide: Quarterly Review']
    assert state.slide['selfCritique']['layoutAction'] == 'keep'


def test_malformed_density_budget_removed():
    state = _state([], density='lots')
    repair_top_level_fields(state)
    assert 'densityBudget' not in state.slide['routerConfig']
    assert 'Removed malformed densityBudget' in state.log
