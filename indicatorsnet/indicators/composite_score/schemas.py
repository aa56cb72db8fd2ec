from ...models import BaseParameters


class CompositeScoreParameters(BaseParameters):
    pass
