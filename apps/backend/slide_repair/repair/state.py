"""
Intermediate state threaded through the repair stages.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from slide_repair.repair.budget import DensityLimits, read_density_limits
from slide_repair.repair.layouts import FALLBACK_VARIANT, LayoutVariantSpec, get_variant_spec
from slide_repair.repair.warning_log import WarningLog


@dataclass
class RepairState:
    """Everything one repair call owns: the slide, its live components, the
    active layout variant, the density limits and the warning log."""

    slide: Dict[str, Any]
    components: List[Dict[str, Any]] = field(default_factory=list)
    variant: str = FALLBACK_VARIANT
    density: DensityLimits = field(default_factory=DensityLimits)
    log: WarningLog = field(default_factory=WarningLog)

    @classmethod
    def from_slide(cls, slide: Dict[str, Any]) -> 'RepairState':
        router_config = slide.get('routerConfig')
        variant = router_config.get('layoutVariant') if isinstance(router_config, dict) else None
        return cls(
            slide=slide,
            variant=variant if isinstance(variant, str) else FALLBACK_VARIANT,
            density=read_density_limits(router_config),
            log=WarningLog(slide.get('warnings') if isinstance(slide.get('warnings'), list) else None),
        )

    @property
    def spec(self) -> LayoutVariantSpec:
        return get_variant_spec(self.variant)

    @property
    def kinds(self) -> List[str]:
        return [c.get('type') for c in self.components]

    def reroute(self, variant: str, reason: str) -> bool:
        """Switch the layout variant and record why. Returns True when it changed."""
        self.log.add(f"Auto-rerouted layout to {variant}: {reason}")
        if variant == self.variant:
            return False
        self.variant = variant
        return True

    def commit(self) -> Dict[str, Any]:
        """Write the state back onto the slide dict."""
        layout_plan = self.slide.get('layoutPlan')
        if not isinstance(layout_plan, dict):
            layout_plan = {}
            self.slide['layoutPlan'] = layout_plan
        layout_plan['components'] = self.components

        router_config = self.slide.get('routerConfig')
        if not isinstance(router_config, dict):
            router_config = {}
            self.slide['routerConfig'] = router_config
        router_config['layoutVariant'] = self.variant

        self.slide['warnings'] = self.log.to_list()
        return self.slide
