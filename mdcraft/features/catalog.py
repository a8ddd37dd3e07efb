"""
Default feature set: the standard text algorithms plus every bundled generator.
"""
import logging

from mdcraft.features.registry import FeatureManager
from mdcraft.features import standard
from mdcraft.generators import badge, code, diagram, folder_tree, table, toc

logger = logging.getLogger(__name__)

FEATURE_MODULES = [standard, table, diagram, folder_tree, toc, badge, code]


def build_default_manager() -> FeatureManager:
    manager = FeatureManager()
    for module in FEATURE_MODULES:
        manager.register_all(module.get_features())
    logger.debug(f"Default features: {[f.name for f in manager.features]}")
    return manager
