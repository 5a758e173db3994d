"""Tests for upstream response normalization."""

from pokeprice.parsers.responses import (
    POKEDATA_SET_CARDS,
    POKEDATA_SETS,
    POKEMON_TCG_SETS,
    PokeDataCardRecord,
    PokeDataSetRecord,
    TcgSetRecord,
    extract_items,
    parse_records,
    transform_pokedata_pricing,
)

CARD_ITEMS = [
    {"id": 73121, "name": "Eevee", "num": "074", "set_id": 557, "set_code": "PRE"},
    {"id": 73160, "name": "Umbreon ex", "num": "161", "set_id": 557, "set_code": "PRE"},
]


class TestExtractItems:
    def test_bare_array(self) -> None:
        assert extract_items(CARD_ITEMS, POKEDATA_SET_CARDS) == CARD_ITEMS

    def test_results_and_data_envelopes_normalize_identically(self) -> None:
        """{results: [...]} and {data: [...]} yield the same array."""
        from_results = extract_items({"results": CARD_ITEMS}, POKEDATA_SET_CARDS)
        from_data = extract_items({"data": CARD_ITEMS}, POKEDATA_SET_CARDS)

        assert from_results == from_data == CARD_ITEMS

    def test_cards_envelope(self) -> None:
        assert extract_items({"cards": CARD_ITEMS}, POKEDATA_SET_CARDS) == CARD_ITEMS

    def test_unrecognized_shape_is_empty(self) -> None:
        assert extract_items({"items": CARD_ITEMS}, POKEDATA_SET_CARDS) == []
        assert extract_items("not json", POKEDATA_SET_CARDS) == []
        assert extract_items(None, POKEDATA_SETS) == []

    def test_envelope_keys_are_per_endpoint(self) -> None:
        """The Pokemon TCG sets endpoint only accepts a data wrapper."""
        assert extract_items({"results": [{"id": "sv1"}]}, POKEMON_TCG_SETS) == []

    def test_non_dict_items_dropped(self) -> None:
        assert extract_items([{"id": 1}, "junk", 3], POKEDATA_SETS) == [{"id": 1}]


class TestParseRecords:
    def test_invalid_records_skipped(self) -> None:
        items = [{"id": 557, "name": "Prismatic Evolutions"}, {"name": "No id"}]

        records = parse_records(items, PokeDataSetRecord)

        assert len(records) == 1
        assert records[0].id == 557

    def test_card_number_stringified(self) -> None:
        items = [{"id": 1, "name": "Pikachu", "num": 25, "set_id": 3}]

        records = parse_records(items, PokeDataCardRecord)

        assert records[0].num == "25"

    def test_card_record_to_card(self) -> None:
        card = parse_records(CARD_ITEMS, PokeDataCardRecord)[0].to_card()

        assert card.id == "73121"
        assert card.set_id == 557
        assert card.card_number == "074"
        assert card.image_small is None

    def test_tcg_set_aliases(self) -> None:
        record = TcgSetRecord.model_validate(
            {
                "id": "sv8pt5",
                "name": "Prismatic Evolutions",
                "ptcgoCode": "PRE",
                "releaseDate": "2025/01/17",
            }
        )

        assert record.ptcgo_code == "PRE"
        assert record.release_date == "2025/01/17"


class TestTransformPricing:
    def test_graded_and_raw_prices(self) -> None:
        payload = {
            "pricing": {
                "PSA 10.0": {"currency": "USD", "value": 412.5},
                "PSA 9.0": {"currency": "USD", "value": 120.0},
                "CGC 9.5": {"currency": "USD", "value": 150.0},
                "TCGPlayer": {"currency": "USD", "value": 38.2},
                "eBay Raw": {"currency": "USD", "value": 35.0},
                "Pokedata Raw": {"currency": "USD", "value": 36.1},
            }
        }

        result = transform_pokedata_pricing(payload)

        assert result == {
            "psa": {"10": 412.5, "9": 120.0},
            "cgc": {"9_5": 150.0},
            "tcgPlayer": 38.2,
            "ebayRaw": 35.0,
            "pokeDataRaw": 36.1,
        }

    def test_zero_and_missing_values_dropped(self) -> None:
        payload = {
            "data": {"pricing": {"PSA 10.0": {"value": 0}, "TCGPlayer": {"currency": "USD"}}}
        }

        assert transform_pokedata_pricing(payload) == {}

    def test_no_pricing(self) -> None:
        assert transform_pokedata_pricing({"id": 1}) == {}
        assert transform_pokedata_pricing([]) == {}
