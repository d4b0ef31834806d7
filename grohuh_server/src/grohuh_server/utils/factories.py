import factory
from grohuh_core.domain.models import Reading


class ReadingFactory(factory.Factory):
    class Meta:
        model = Reading

    device = "NTCRBLR00Y"
    time = factory.Sequence(lambda n: f"2024-05-01 12:{n // 60 % 60:02d}:{n % 60:02d}")
    buffered = "no"
    values = factory.LazyFunction(
        lambda: {"SOC": 75, "pvpowerin": 15230, "pvgridvoltage": 2301, "epvtotal": 48211}
    )
