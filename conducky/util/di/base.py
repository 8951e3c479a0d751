from dishka import Provider as DishkaProvider

from conducky.util.di.scope import Scope


class Provider(DishkaProvider):
    """Base for all Conducky providers. Unannotated provides default to UOW scope."""

    scope = Scope.UOW
