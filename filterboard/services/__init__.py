"""
Service layer: startup retrieval of the dataset and chart configurations.
"""

from .data_loader import LoadedData, load_all, load_dataset, fetch_chart_config

__all__ = ["LoadedData", "load_all", "load_dataset", "fetch_chart_config"]
