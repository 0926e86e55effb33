from dishka import Provider, Scope, provide
from core.environment.config import Settings, ExplorerCredentials


class EnvironmentProvider(Provider):
    """
    Provider for environment configuration.
    """

    component = "environment"
    scope = Scope.APP

    @provide
    def get_environment(self) -> Settings:
        """
        Provide application settings.

        Returns
        -------
        Settings
            Application settings instance
        """
        return Settings()

    @provide
    def get_credentials(self, settings: Settings) -> ExplorerCredentials:
        """
        Provide explorer credentials resolved once at startup.

        Parameters
        ----------
        settings : Settings
            Application settings

        Returns
        -------
        ExplorerCredentials
            Per-network API keys
        """
        return ExplorerCredentials.from_settings(settings)
