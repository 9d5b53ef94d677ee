class ReleaseDigestError(Exception):
    """Base error for a release digest run."""


class SettingsError(ReleaseDigestError):
    """Settings are missing or malformed. Fatal."""


class RepositoryListingError(ReleaseDigestError):
    """The starred repository listing could not be retrieved. Fatal."""


class ReleaseFeedError(ReleaseDigestError):
    """One repository's release feed could not be fetched or parsed."""

    def __init__(self, full_name: str, message: str) -> None:
        super().__init__(f"{full_name}: {message}")
        self.full_name = full_name


class DigestDeliveryError(ReleaseDigestError):
    """One rendered page could not be delivered."""
