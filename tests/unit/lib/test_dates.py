from ritual.lib import dates


def test_today_uses_local_clock(set_today):
    set_today("2024-03-10", "23:59:59")
    assert dates.today() == "2024-03-10"
    assert dates.yesterday() == "2024-03-09"


def test_offset_moves_into_the_past():
    assert dates.offset("2024-01-03", 1) == "2024-01-02"
    assert dates.offset("2024-01-03", 0) == "2024-01-03"
    assert dates.offset("2024-01-03", -2) == "2024-01-05"


def test_offset_rolls_across_month_and_year():
    assert dates.offset("2024-01-01", 1) == "2023-12-31"
    assert dates.offset("2024-03-01", 1) == "2024-02-29"
    assert dates.offset("2023-03-01", 1) == "2023-02-28"
    assert dates.offset("2023-12-31", -1) == "2024-01-01"


def test_weekday_is_sunday_first():
    assert dates.weekday("2024-01-07") == 0
    assert dates.weekday("2024-01-01") == 1
    assert dates.weekday("2024-01-06") == 6


def test_iso_timestamp(set_today):
    set_today("2024-01-03", "07:15:30")
    assert dates.iso_timestamp() == "2024-01-03T07:15:30"


def test_is_today_and_yesterday(set_today):
    set_today("2024-01-03")
    assert dates.is_today("2024-01-03")
    assert dates.is_yesterday("2024-01-02")
    assert not dates.is_yesterday("2024-01-03")


def test_parse_date_arg_keywords(set_today):
    set_today("2024-01-03")
    assert dates.parse_date_arg("today") == "2024-01-03"
    assert dates.parse_date_arg("Yesterday") == "2024-01-02"


def test_parse_date_arg_weekday_looks_back(set_today):
    # 2024-01-03 is a Wednesday
    set_today("2024-01-03")
    assert dates.parse_date_arg("mon") == "2024-01-01"
    assert dates.parse_date_arg("wednesday") == "2024-01-03"
    assert dates.parse_date_arg("thu") == "2023-12-28"
    assert dates.parse_date_arg("sun") == "2023-12-31"


def test_parse_date_arg_iso_and_freeform(set_today):
    set_today("2024-01-03")
    assert dates.parse_date_arg("2023-12-25") == "2023-12-25"
    assert dates.parse_date_arg("Jan 2") == "2024-01-02"


def test_parse_date_arg_garbage(set_today):
    set_today("2024-01-03")
    assert dates.parse_date_arg("not a date at all") is None
