import math

import pytest

from storefront.core.exceptions import InvalidPaginationError
from storefront.services.pager import Page, last_page, page_window, paginate


@pytest.mark.parametrize("total", [0, 1, 19, 20, 21, 45])
@pytest.mark.parametrize("page_size", [1, 5, 20])
@pytest.mark.parametrize("page", [1, 2, 3, 10])
def test_slice_length_matches_window(total, page_size, page):
    items = list(range(total))
    result = paginate(items, page, page_size)

    assert result.num_of_results_on_cur_page == min(page_size, max(0, total - (page - 1) * page_size))
    assert result.last_page == math.ceil(total / page_size)
    assert result.total == total


def test_page_contents():
    result = paginate(list(range(10)), page=2, page_size=4)
    assert result.items == [4, 5, 6, 7]


def test_page_past_end_is_empty():
    result = paginate(list(range(5)), page=3, page_size=5)
    assert result.items == []
    assert result.last_page == 1


def test_last_page_zero_for_empty():
    assert last_page(0, 20) == 0


def test_page_window():
    assert page_window(1, 20) == (0, 20)
    assert page_window(3, 10) == (20, 10)


@pytest.mark.parametrize("page, page_size", [(0, 10), (-1, 10), (1, 0)])
def test_rejects_invalid_pagination(page, page_size):
    with pytest.raises(InvalidPaginationError):
        paginate([1, 2, 3], page, page_size)


def test_from_window():
    result = Page.from_window(["a", "b"], total=12, page=6, page_size=2)
    assert result.last_page == 6
    assert result.num_of_results_on_cur_page == 2
