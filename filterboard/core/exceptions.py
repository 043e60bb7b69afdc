class FilterboardError(Exception):
    """Base exception for all filterboard errors"""
    pass

class ConfigError(FilterboardError):
    """Invalid or inconsistent global.json"""
    pass

class DataLoadError(FilterboardError):
    """
    The dataset or one of the chart configurations could not be retrieved.
    Raised by the startup barrier; the dashboard is not built when this happens.
    """

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")

class ChartConfigError(FilterboardError):
    """Chart configuration names an unknown template or binds a missing column"""
    pass

class UnknownColumnError(FilterboardError, KeyError):
    """
    A column was looked up that is not managed (filter state) or not present (dataset)
    """

    def __init__(self, column: str, where: str = "filter state"):
        self.column = column
        self.where = where
        super().__init__(f"Column '{column}' not found in {where}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return f"Column '{self.column}' not found in {self.where}"
