"""Survey data loading and support filtering."""

from deltagam.survey.loader import (
    SurveyDataLoader,
    filter_grid_to_support,
    depth_support,
    mean_location,
)

__all__ = ['SurveyDataLoader', 'filter_grid_to_support', 'depth_support', 'mean_location']
