"""
Dry-run report rendering.

Turns a ``DryRunResult`` into the plain-text report printed by the CLI,
using a Jinja2 template.
"""

from __future__ import annotations

from collections import Counter

from jinja2 import Environment, StrictUndefined

from coursekit_core.analyzer.models import DryRunResult

# Unused nodes beyond this many are elided with "..."
MAX_LISTED_NODES = 10

REPORT_TEMPLATE = """\
=== Coursekit Dry Run Report ===

## Complexity
- Scenes: {{ c.total_scenes }}
- Nodes: {{ c.total_nodes }}
- Triggers: {{ c.total_triggers }}
- Actions: {{ c.total_actions }}
- Max Path Length: {{ c.max_path_length }}
- Avg Path Length: {{ c.average_path_length }}
- Branching Factor: {{ c.branching_factor }}

## Coverage
- Scene Coverage: {{ "%.1f"|format(cov.scenes.coverage) }}% ({{ cov.scenes.reachable }}/{{ cov.scenes.total }})
- Node References: {{ cov.nodes.referenced }}/{{ cov.nodes.total }}
- Triggers with Conditions: {{ cov.triggers.with_conditions }}/{{ cov.triggers.total }}
- Triggers with Else: {{ cov.triggers.with_else }}/{{ cov.triggers.total }}

## Action Distribution
{% for tag, count in action_counts %}
- {{ tag }}: {{ count }}
{% endfor %}

{% if not dead.is_empty %}
## Dead Code Detected
{% if dead.unreachable_scenes %}
- Unreachable Scenes: {{ dead.unreachable_scenes|join(", ") }}
{% endif %}
{% if dead.unused_nodes %}
- Unused Nodes: {{ dead.unused_nodes[:max_nodes]|join(", ") }}{% if dead.unused_nodes|length > max_nodes %}...{% endif %}

{% endif %}
{% if dead.dead_triggers %}
- Dead Triggers: {{ dead.dead_triggers|map("string")|join(", ") }}
{% endif %}

{% endif %}
{% if unknown_targets %}
## Unknown Scene Targets
- {{ unknown_targets|join(", ") }}

{% endif %}
{% if mutation_counts %}
## State Mutations
{% for path, count in mutation_counts %}
- {{ path }}: {{ count }} mutations
{% endfor %}

{% endif %}
## Execution Paths: {{ paths|length }}
- Complete: {{ complete }}
- With Loops: {{ loops }}
{% if truncated %}
- Truncated: path limit reached
{% endif %}
"""

_env = Environment(
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=False,
    undefined=StrictUndefined,
    autoescape=False,
)
_template = _env.from_string(REPORT_TEMPLATE)


def render_report(result: DryRunResult) -> str:
    """Render the human-readable dry-run report."""
    action_counts = sorted(
        result.coverage.actions.by_type.items(),
        key=lambda item: item[1],
        reverse=True,
    )
    mutation_counts = list(Counter(m.path for m in result.mutations).items())

    return _template.render(
        c=result.complexity,
        cov=result.coverage,
        action_counts=action_counts,
        dead=result.dead_code,
        max_nodes=MAX_LISTED_NODES,
        unknown_targets=result.unknown_scene_targets,
        mutation_counts=mutation_counts,
        paths=result.paths,
        complete=len(result.complete_paths),
        loops=len(result.loop_paths),
        truncated=result.truncated,
    ).rstrip("\n")
