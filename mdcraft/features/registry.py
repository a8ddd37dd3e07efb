from enum import Enum, auto
from typing import Callable, List, Optional, Any, Dict
import logging

logger = logging.getLogger(__name__)

class FeatureState(Enum):
    STANDARD = auto()
    EXPERIMENTAL = auto()

class FeatureType(Enum):
    ALGORITHM = auto() # Text -> text preprocessing ahead of rendering
    GENERATOR = auto() # Configuration -> markdown fragment

class Feature:
    def __init__(self, name: str, handler: Callable[..., Any], state: FeatureState, feature_type: FeatureType = FeatureType.ALGORITHM, meta: Dict = None):
        self.name = name
        self.handler = handler
        self.state = state
        self.type = feature_type
        self.meta = meta or {}

    def __repr__(self):
        return f"Feature({self.name!r}, {self.state.name}, {self.type.name})"

class Pipeline:
    """
    A sequence of algorithms (Features) to be executed in order.
    Every markdown document passes through it before rendering.
    """
    def __init__(self, name: str):
        self.name = name
        self._steps: List[Callable[[str], str]] = []

    def add_step(self, handler: Callable[[str], str]):
        self._steps.append(handler)

    def run(self, content: str) -> str:
        """Execute the pipeline on the content."""
        for step in self._steps:
            try:
                content = step(content)
            except Exception as e:
                # A broken step is skipped; the content from the previous step is kept
                logger.error(f"Pipeline {self.name} step {getattr(step, '__name__', 'unknown')} failed: {e}")
        return content

    def __iter__(self):
        return iter(self._steps)

    def __len__(self):
        return len(self._steps)

class FeatureManager:
    """
    Holds the registered features and builds Pipelines from them.
    """
    def __init__(self):
        self._features: List[Feature] = []

    def register(self, feature: Feature):
        """Register a feature. A feature with the same name is replaced."""
        existing_idx = next((i for i, f in enumerate(self._features) if f.name == feature.name), -1)
        if existing_idx >= 0:
            self._features[existing_idx] = feature
            logger.warning(f"FeatureManager: Overwrote existing feature '{feature.name}' (State: {feature.state})")
        else:
            self._features.append(feature)
            logger.debug(f"FeatureManager: Registered feature {feature.name}")

    def register_all(self, features: List[Feature]):
        for feature in features:
            self.register(feature)

    @property
    def features(self) -> List[Feature]:
        return list(self._features)

    def is_feature_enabled(self, feature: Feature) -> bool:
        """
        A feature is enabled unless its meta carries 'enabled': False.
        """
        enabled = feature.meta.get('enabled', True)
        if not enabled:
            logger.debug(f"FeatureManager: BLOCKED access to disabled feature '{feature.name}'")
        return enabled

    def get_generator(self, name: str) -> Optional[Callable]:
        """
        Retrieve a registered generator handler by feature name or its 'alias' meta tag.
        """
        for feature in self._features:
            if feature.type != FeatureType.GENERATOR:
                continue
            if feature.name == name or feature.meta.get('alias') == name:
                if self.is_feature_enabled(feature):
                    logger.debug(f"FeatureManager: Found generator for {name} ({feature.name})")
                    return feature.handler
                logger.warning(f"FeatureManager: Found generator for {name} ({feature.name}) but it is DISABLED.")
                return None

        logger.warning(f"FeatureManager: No generator found for {name}. Available: {[f.name for f in self._features]}")
        return None

    def build_pipeline(self, enable_experimental: bool) -> Pipeline:
        """
        Build the standard processing pipeline.
        Steps run in registration order.
        """
        pipeline = Pipeline("StandardPipeline")

        for f in self._features:
            if f.type != FeatureType.ALGORITHM:
                continue

            if not self.is_feature_enabled(f):
                continue

            if f.state == FeatureState.STANDARD:
                pipeline.add_step(f.handler)
            elif enable_experimental and f.state == FeatureState.EXPERIMENTAL:
                pipeline.add_step(f.handler)

        logger.debug(f"FeatureManager: Built pipeline with {len(pipeline)} steps (experimental={enable_experimental})")
        return pipeline

    def get_features_by_type(self, feature_type: FeatureType) -> List[Feature]:
        """
        Retrieve all features of a specific type.
        """
        features = [f for f in self._features if f.type == feature_type]
        logger.debug(f"FeatureManager: Found {len(features)} features of type {feature_type}")
        return features
