# consequencekit

A library for estimating what a flood does to buildings and to the people
in them:

- **Structure damage**: depth–damage and erosion–damage curves, grouped by
  occupancy type and by the hazard parameters they apply to, applied to
  deterministic or stochastic structures.
- **Foundation height uncertainty**: a default table of normal
  distributions by occupancy group, foundation type and flood zone, which
  can also be read from and written to JSON.
- **Warning response**: a compliance-based warning system that reduces the
  population left in a structure.
- **Structural stability and life loss**: depth-times-velocity stability
  criteria and lethality curves that turn the population left behind into
  estimated fatalities.
- **Structure inventories**: streaming structures from an inventory web
  service, and per-area summary statistics.
- **Results writers**: JSON, newline-delimited JSON, in-memory JSON, damage
  summaries and aggregated stage–damage histograms.

## Installation

```
pip install consequencekit
```

To run the test suite:

```
pip install "consequencekit[test]"
pytest
```

## Modules

| Module | What it provides |
| --- | --- |
| `consequencekit.statistics` | `NormalDistribution`, `TriangularDistribution`, `DeterministicDistribution`, `distribution_from_dict()`, `PairedData`, `UncertaintyPairedData`, `InlineHistogram` |
| `consequencekit.hazards` | `Parameter` bit flags and `HazardEvent` |
| `consequencekit.results` | `Result` rows and `ParameterValue` |
| `consequencekit.foundation` | `FoundationUncertainty`, `FoundationHeightUncertainty` |
| `consequencekit.occupancy` | `DamageFunction`, `DamageFunctionStochastic`, their `...Family` collections, `OccupancyTypeDeterministic`, `OccupancyTypeStochastic`, `OccupancyTypesContainer`, `JsonOccupancyTypeProvider` |
| `consequencekit.structures` | `BaseStructure`, `PopulationSet`, `StructureStochastic`, `StructureDeterministic` |
| `consequencekit.warning` | `ComplianceBasedWarningSystem` |
| `consequencekit.stability` | `Stability`, `StabilityCriteria` and the `RESC_DAM_*` criteria |
| `consequencekit.lifeloss` | `LifeLossEngine`, `LethalityCurve`, `LethalityZone`, `Mobility`, `life_loss_header()`, `life_loss_default_results()` |
| `consequencekit.nsi` | `NsiStreamProvider`, `NsiProperties`, `nsi_feature_to_structure()` |
| `consequencekit.stats` | `Stats`, `stats_by_fips()`, `asset_type()` |
| `consequencekit.factory` | `StructureProviderInfo`, `StructureProviderType`, `structure_schema()`, `optional_schema()` |
| `consequencekit.writers` | `JsonResultsWriter`, `StreamingResultsWriter`, `SummaryResultsWriter`, `VirtualResultsWriter`, `AggregatedStageDamageWriter`, `format_money()` |

## Examples

### Damage to a structure

```python
from consequencekit.hazards import HazardEvent, Parameter
from consequencekit.occupancy import (
    DamageFunction,
    DamageFunctionFamily,
    OccupancyTypeDeterministic,
)
from consequencekit.statistics import PairedData
from consequencekit.structures import StructureDeterministic

curve = DamageFunction(
    "example", Parameter.DEPTH, PairedData((1.0, 2.0, 3.0, 4.0), (10.0, 20.0, 30.0, 40.0))
)
family = DamageFunctionFamily({Parameter.DEFAULT: curve})
occtype = OccupancyTypeDeterministic(
    "example", {"structure": family, "contents": family}
)
structure = StructureDeterministic(occ_type=occtype, struct_val=100.0, cont_val=100.0)

result = structure.compute(HazardEvent(depth=2.5))
result.fetch("structure damage")   # 25.0
result.to_json()
```

`compute` picks the damage function registered for the event's exact
combination of parameters, falling back to `Parameter.DEFAULT`. It raises
`ValueError` when the event carries none of the quantities the damage
functions are driven by (and is not qualitative), and `KeyError` when the
occupancy type lacks a `"structure"` or `"contents"` component.

A `StructureStochastic` holds `ParameterValue`s that may be distributions;
`sample(seed)` draws a `StructureDeterministic` from them, and
`apply_foundation_height_uncertainty()` replaces the foundation height with
the matching entry of a `FoundationUncertainty` table.

### Foundation height uncertainty

```python
from consequencekit.foundation import FoundationUncertainty

table = FoundationUncertainty.default()
text = table.to_json()
same = FoundationUncertainty.from_json(text)
```

`FoundationUncertainty.from_file(path)` reads the same JSON form from disk.

### Occupancy types

```python
from consequencekit.occupancy import JsonOccupancyTypeProvider

provider = JsonOccupancyTypeProvider.from_path("occtypes.json")
com1 = provider.occupancy_type_map()["COM1"]
deterministic = com1.central_tendency()
sampled = com1.sample(1234)
print(provider.container.report())
```

`OccupancyTypesContainer` can `extend`, `merge` or `override` its types with
others and raises `ValueError` on conflicts. `JsonOccupancyTypeProvider.write`
appends the types as JSON to a file.

### Stability and life loss

```python
from consequencekit.hazards import HazardEvent
from consequencekit.lifeloss import LifeLossEngine
from consequencekit.stability import RESC_DAM_WOOD_UNANCHORED
from consequencekit.structures import PopulationSet
from consequencekit.warning import ComplianceBasedWarningSystem

RESC_DAM_WOOD_UNANCHORED.evaluate(HazardEvent(depth=100, dv=35))  # Stability.COLLAPSED

warning = ComplianceBasedWarningSystem(seed=12345, compliance_rate=0.75)
engine = LifeLossEngine.create(12345678, warning)
structure.population = PopulationSet(100, 100, 100, 100)
losses = engine.compute_life_loss(HazardEvent(depth=3.0, dv=75.3), structure)
losses.fetch("ll_tot")
```

The result's columns are given by `life_loss_header()`:
`ll_u65`, `ll_o65` and `ll_tot`. Draws are seeded, so the same seeds give the
same results. `StabilityCriteria.evaluate` raises `ValueError` when the event
has no depth-times-velocity or no depth.

### Streaming structures from an inventory service

```python
from consequencekit.nsi import NsiStreamProvider
from consequencekit.occupancy import JsonOccupancyTypeProvider
from consequencekit.stats import stats_by_fips

provider = NsiStreamProvider(
    "https://inventory.example.com/structures",
    JsonOccupancyTypeProvider.from_path("occtypes.json"),
)
for structure in provider.by_fips("15005"):
    print(structure.name, structure.occ_type.name)

stats = stats_by_fips("15005", provider)
stats.total_count, stats.count_by_category
```

`by_fips`, `by_bbox` and `by_json_post` send the request with `requests`
(without certificate verification) and yield `StructureStochastic`s as the
response is read. Occupancy types are looked up as `occtype-foundtype`, then
`occtype`, then `RES1-1SNB`.

`StructureProviderInfo(StructureProviderType.NSIAPI, api_url=..., occtype_file_path=...).create()`
builds the same provider from a description.

### Writing results

```python
import io
from consequencekit.writers import SummaryResultsWriter, VirtualResultsWriter

writer = VirtualResultsWriter()
writer.write(result)
document = writer.getvalue()   # bytes: {"consequences":[{...},]}

with SummaryResultsWriter.from_path("summary.txt") as summary:
    summary.write(result)
```

`JsonResultsWriter` and `VirtualResultsWriter` follow every result with a
comma, so the closing `]}` comes after a trailing comma. `from_path` opens the
file for appending, creating it with mode 0600; a writer given a stream does
not close it. `SummaryResultsWriter` reports amounts with `format_money()`,
for example `$1,234.50`. `AggregatedStageDamageWriter` keeps its histograms in
memory and writes nothing to its file.

## What the package does not do

- There is no command-line program and no server; it is used as a library.
- It does not read structures from local spatial files. `StructureProviderInfo.create()`
  raises `ValueError` for `GPKG`, `SHP` and `OGR` providers; only the web
  service provider is available.
- It has no spatial output writers (GeoJSON, GeoPackage, Shapefile, Parquet).
- It does not read hazard grids or run a full compute over a study area; hazard
  events are built in code as `HazardEvent`s.
- It ships no occupancy type library; damage functions come from a JSON file
  or are built in code.