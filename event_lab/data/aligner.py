"""Date alignment of two independently fetched price series."""

from .models import AlignedPoint, MarketSeries


class SeriesAligner:
    """Inner-joins two series on their common session dates."""

    @staticmethod
    def align(series_a: MarketSeries, series_b: MarketSeries) -> list[AlignedPoint]:
        """
        Align two series on the dates both contain.

        Args:
            series_a: First series (the "a" leg of each aligned point)
            series_b: Second series (the "b" leg)

        Returns:
            Aligned points sorted ascending by date
        """
        index_b = series_b.date_index
        aligned = [
            AlignedPoint(date=point.date, a=point, b=series_b[index_b[point.date]])
            for point in series_a
            if point.date in index_b
        ]
        aligned.sort(key=lambda item: item.date)
        return aligned
