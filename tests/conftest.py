import pytest

from tcgmanager.models.card import CardPrices, CardRecord

MARKETPLACE_HEADER = (
    "TCGplayer Id,Product Line,Set Name,Product Name,Title,Number,Rarity,Condition,"
    "TCG Market Price,TCG Direct Low,TCG Low Price With Shipping,TCG Low Price,"
    "Total Quantity,Add to Quantity,TCG Marketplace Price,Photo URL"
)


@pytest.fixture
def marketplace_header() -> str:
    return MARKETPLACE_HEADER


@pytest.fixture
def sample_marketplace_csv() -> str:
    """Marketplace export with three in-stock rows and one out-of-stock row."""
    return f"""{MARKETPLACE_HEADER}
"374437","Magic","9th Edition","Sengir Vampire","","","R","Lightly Played","0.41","","1.4800","0.1700","1","0","0.9800",""
"17173","Magic","7th Edition","Static Orb","","319","R","Near Mint","16.36","0","16.39","16.39","1","0","16.39",""
"6723809","Magic","30th Anniversary Promos","Niv-Mizzet, the Firemind","","14","P","Near Mint Foil","1.11","1.13","2.2900","0.9800","0.9800","0","0.6800",""
"23342","Magic","8th Edition","Glorious Anthem","","20","R","Near Mint","0.32","0","1.56","0.25","1","0","0.94",""
"""


@pytest.fixture
def sample_scryfall_card() -> dict:
    """Scryfall card object."""
    return {
        "object": "card",
        "id": "0b2ed2c9-3ea3-4b6a-9b5e-0b3f1f1d1a11",
        "name": "Lightning Bolt",
        "set": "2xm",
        "set_name": "Double Masters",
        "collector_number": "129",
        "rarity": "uncommon",
        "tcgplayer_id": 210350,
        "image_uris": {
            "small": "https://cards.scryfall.io/small/front/0/b/bolt.jpg",
            "normal": "https://cards.scryfall.io/normal/front/0/b/bolt.jpg",
        },
        "prices": {"usd": "1.25", "usd_foil": "4.10", "eur": None},
    }


@pytest.fixture
def sample_search_response(sample_scryfall_card: dict) -> dict:
    """Scryfall search response with two printings."""
    second = dict(sample_scryfall_card)
    second.update(
        id="1c3fe3da-4fb4-4c7b-8c6f-1c4f2f2e2b22",
        set="m10",
        set_name="Magic 2010",
        collector_number="146",
        rarity="common",
        tcgplayer_id=33456,
        prices={"usd": "2.40"},
    )
    return {"object": "list", "has_more": False, "data": [sample_scryfall_card, second]}


@pytest.fixture
def niv_mizzet() -> CardRecord:
    return CardRecord(
        id="6723809",
        tcgplayer_id="6723809",
        name="Niv-Mizzet, the Firemind",
        set_name="30th Anniversary Promos",
        collector_number="14",
        rarity="promo",
        prices=CardPrices(market=1.11, low=0.98, low_with_shipping=2.29, direct_low=1.13),
    )


@pytest.fixture
def standard_card() -> CardRecord:
    """Card whose recommended price is 5.00 (standard tier)."""
    return CardRecord(
        id="snapcaster",
        name="Snapcaster Mage",
        set_name="Innistrad",
        rarity="mythic",
        prices=CardPrices(market=5.00, low=4.50, low_with_shipping=3.00),
    )
