"""Results returned by storage when looking up a single feature."""

from dataclasses import dataclass

from webstatus_backend.core.entities.api import Feature


@dataclass(frozen=True)
class RegularFeatureResult:
    """The feature exists under the requested identifier."""

    feature: Feature


@dataclass(frozen=True)
class MovedFeatureResult:
    """The feature was renamed; clients should follow the new identifier."""

    new_feature_id: str


@dataclass(frozen=True)
class SplitFeatureResult:
    """The feature was split into several features."""

    feature_ids: tuple[str, ...]


FeatureResult = RegularFeatureResult | MovedFeatureResult | SplitFeatureResult
