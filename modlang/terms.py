"""Bundled English -> Turkish Minecraft vocabulary and never-translated identifiers.

Override or extend the term table with ``glossary.path`` in the config file.
"""

from __future__ import annotations

from typing import Dict, Tuple

PROPER_NOUNS: Tuple[str, ...] = (
    "Minecraft", "Steve", "Alex", "Creeper", "Enderman", "Zombie", "Skeleton",
    "Netherite", "Ender Dragon", "Wither", "Piglin", "Hoglin", "Strider",
    "Blaze", "Ghast", "Shulker", "Guardian", "Elder Guardian", "Phantom",
    "Drowned", "Husk", "Stray", "Vindicator", "Evoker", "Vex", "Pillager",
    "Ravager", "Witch", "Silverfish", "Endermite", "Spider", "Cave Spider",
    "Slime", "Magma Cube", "Iron Golem", "Snow Golem", "Villager", "Wandering Trader",
    "RF", "FE", "EU", "JEI", "NEI", "REI", "EMI", "Forge", "Fabric", "NeoForge", "Quilt",
)

TARGET_DIACRITICS = "ğüşıöçĞÜŞİÖÇ"

DEFAULT_TERMS: Dict[str, str] = {
    # basics
    "block": "blok", "item": "eşya", "entity": "varlık", "mob": "yaratık",
    "player": "oyuncu", "inventory": "envanter", "craft": "işle", "crafting": "işleme",
    "world": "dünya", "dimension": "boyut", "biome": "biyom", "structure": "yapı",
    # tools
    "sword": "kılıç", "pickaxe": "kazma", "axe": "balta", "shovel": "kürek",
    "hoe": "çapa", "shears": "makas", "bow": "yay", "crossbow": "tatar yayı",
    "shield": "kalkan", "fishing rod": "olta", "flint and steel": "çakmaktaşı",
    "compass": "pusula", "clock": "saat", "spyglass": "dürbün", "hammer": "çekiç",
    "wrench": "anahtar", "knife": "bıçak", "dagger": "hançer", "spear": "mızrak",
    # armor
    "armor": "zırh", "helmet": "miğfer", "chestplate": "göğüslük", "leggings": "pantolon",
    "boots": "bot", "elytra": "elitra", "cape": "pelerin", "cloak": "pelerin",
    # materials
    "wood": "tahta", "log": "kütük", "plank": "kereste", "stick": "çubuk",
    "stone": "taş", "cobblestone": "kaldırım taşı", "bedrock": "anakaya",
    "iron": "demir", "copper": "bakır", "gold": "altın", "diamond": "elmas",
    "emerald": "zümrüt", "quartz": "kuvars", "amethyst": "ametist", "coal": "kömür",
    "charcoal": "odun kömürü", "redstone": "kırmızıtaş", "glowstone": "parıltıtaş",
    "obsidian": "obsidyen", "crying obsidian": "ağlayan obsidyen",
    "ore": "maden", "ingot": "külçe", "nugget": "parça", "dust": "toz",
    "gem": "mücevher", "crystal": "kristal", "shard": "kırık", "plate": "plaka",
    "gear": "dişli", "rod": "çubuk", "wire": "tel", "circuit": "devre",
    "steel": "çelik", "bronze": "bronz", "silver": "gümüş", "tin": "kalay",
    "lead": "kurşun", "ender pearl": "ender incisi", "blaze rod": "blaze çubuğu",
    # blocks
    "chest": "sandık", "barrel": "varil", "furnace": "fırın", "blast furnace": "pota fırın",
    "hopper": "huni", "dropper": "düşürücü", "dispenser": "dağıtıcı", "door": "kapı",
    "trapdoor": "tuzak kapı", "fence": "çit", "stairs": "merdiven", "slab": "döşeme",
    "wall": "duvar", "bed": "yatak", "torch": "meşale", "lantern": "fener",
    "glass": "cam", "glass pane": "cam levha", "dirt": "toprak", "sand": "kum",
    "gravel": "çakıl", "clay": "kil", "wool": "yün", "carpet": "halı",
    "crafting table": "işleme masası", "enchanting table": "büyü masası",
    "brewing stand": "demleme sehpası", "anvil": "örs", "cauldron": "kazan",
    # magic
    "enchantment": "büyü", "enchanted": "büyülü", "curse": "lanet", "potion": "iksir",
    "effect": "etki", "spell": "büyü", "magic": "sihir", "ritual": "ritüel", "altar": "sunak",
    # mechanics
    "damage": "hasar", "health": "can", "hunger": "açlık", "saturation": "doygunluk",
    "level": "seviye", "experience": "deneyim", "durability": "dayanıklılık",
    "speed": "hız", "attack damage": "saldırı hasarı", "attack speed": "saldırı hızı",
    "knockback": "geri tepme", "resistance": "direnç", "regeneration": "yenilenme",
    "poison": "zehir", "wither": "solma", "weakness": "zayıflık", "strength": "güç",
    "fire resistance": "ateş direnci", "night vision": "gece görüşü",
    "invisibility": "görünmezlik", "slowness": "yavaşlık", "haste": "acele",
    # tech mods
    "energy": "enerji", "power": "güç", "machine": "makine", "generator": "jeneratör",
    "battery": "batarya", "solar panel": "güneş paneli", "reactor": "reaktör",
    "cable": "kablo", "pipe": "boru", "tank": "tank", "fluid": "sıvı", "bucket": "kova",
    "pump": "pompa", "filter": "filtre", "water": "su", "lava": "lav", "fuel": "yakıt",
    "upgrade": "geliştirme", "tier": "seviye", "slot": "yuva", "input": "giriş",
    "output": "çıkış", "storage": "depolama", "network": "ağ", "wireless": "kablosuz",
    # ui
    "config": "ayarlar", "settings": "ayarlar", "options": "seçenekler",
    "enabled": "etkin", "disabled": "devre dışı", "recipe": "tarif", "tooltip": "ipucu",
    "menu": "menü", "button": "düğme", "page": "sayfa", "right click": "sağ tıklama",
    "left click": "sol tıklama", "shift click": "shift tıklama", "info": "bilgi",
    "help": "yardım", "description": "açıklama", "warning": "uyarı", "error": "hata",
    # adjectives
    "rare": "nadir", "epic": "epik", "legendary": "efsanevi", "common": "yaygın",
    "powerful": "güçlü", "weak": "zayıf", "heavy": "ağır", "fast": "hızlı", "slow": "yavaş",
    "broken": "kırık", "ancient": "antik", "basic": "temel", "advanced": "gelişmiş",
    "ultimate": "nihai", "improved": "geliştirilmiş", "magical": "sihirli",
    # amounts and time
    "amount": "miktar", "capacity": "kapasite", "maximum": "maksimum", "minimum": "minimum",
    "stack": "yığın", "second": "saniye", "minute": "dakika", "hour": "saat", "day": "gün",
    "night": "gece", "duration": "süre", "cooldown": "bekleme süresi",
    # misc
    "required": "gerekli", "optional": "isteğe bağlı", "locked": "kilitli",
    "unlocked": "kilidi açık", "hidden": "gizli", "active": "aktif", "progress": "ilerleme",
    "mode": "mod", "type": "tür", "version": "versiyon", "raw": "ham",
}
