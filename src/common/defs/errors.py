"""shortest-build全体で使用する例外の定義."""


class ShortestBuildError(Exception):
    """shortest-buildの基底例外."""


class MissingDependencyError(ShortestBuildError):
    """必要なコマンドがPATH上に存在しない."""

    def __init__(self, command: str, hint: str = "") -> None:
        self.command = command
        self.hint = hint
        msg = f"{command} is not installed."
        if hint:
            msg = f"{msg} {hint}"
        super().__init__(msg)


class MissingCredentialError(ShortestBuildError):
    """APIキーが設定されていない."""

    def __init__(self, env_var: str, env_file: str) -> None:
        self.env_var = env_var
        self.env_file = env_file
        super().__init__(f"{env_var} is not set. Please set it in {env_file}")
