from .requests import CredentialsForm, ProfileForm
from .responses import HomeResponse, UserOut

__all__ = ["CredentialsForm", "ProfileForm", "HomeResponse", "UserOut"]
