from iridology.config.settings import AnalysisConfig, ConfigError, load_analysis_config, save_analysis_config

__all__ = ["AnalysisConfig", "ConfigError", "load_analysis_config", "save_analysis_config"]
