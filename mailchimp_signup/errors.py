class Error(Exception):
    def __init__(self, *args):
        super().__init__(*args)
        self.message = f"{args[0]}" if args else ""


class NoDataProvidedError(Error):
    pass


class InvalidDataError(Error):
    pass


class MalformedCredentialError(Error):
    """The API key carries no data center suffix, e.g. `xxxx-us7`."""


class EmptyInputError(Error):
    pass
