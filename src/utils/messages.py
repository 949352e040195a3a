from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    posted by the sidebar when the user confirms logging out
    """

    bubble = True


class UserLoginMessage(Message):
    """
    Fired by the app after the session store reports a new identity,
    so screens can refresh. user is None for guests.
    """

    bubble = True

    def __init__(self, user=None) -> None:
        super().__init__()
        self.user = user


class CartChangedMessage(Message):
    """
    Fired by the app whenever the cart store emits.
    count mirrors CartStore.count at the time of posting.
    """

    bubble = True

    def __init__(self, count: int = 0) -> None:
        super().__init__()
        self.count = count


class LoginRequestedMessage(Message):
    """
    posted by the sidebar when a guest asks to log in
    """

    bubble = True
