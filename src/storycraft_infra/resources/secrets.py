import pulumi_random as random


def create_auth_secret() -> random.RandomPassword:
    """
    Session signing secret for the app's auth layer.

    Generated on the first `pulumi up` and kept in stack state afterwards.
    Rotate with `pulumi up --replace <urn>`.
    """
    return random.RandomPassword(
        "auth-secret",
        length=32,
        special=False,
    )
