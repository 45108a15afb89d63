import logging

import geopandas as gpd
import numpy as np
import pandas as pd
import pytest
from shapely.geometry import GeometryCollection, LineString, MultiPoint, Point, Polygon, box

from tidysf import FeatureCollection, GroupedFeatureCollection
from tidysf.errors import CRSError, GeometryError, MissingColumnError


def test_geometry_column_matches_row_count(points, squares):
    for fc in (points, squares, points.filter("value > 15"), points.count("kind")):
        assert len(fc.geometry) == len(fc)
        assert len(fc.frame) == len(fc)


def test_from_table_builds_points(points):
    assert points.columns == ["id", "name", "kind", "value", "geometry"]
    assert points.crs.to_epsg() == 3857
    assert set(points.geometry_types) == {"Point"}
    assert points.geometry.iloc[2].equals(Point(5.5, 5.5))


def test_from_table_keeps_coordinates_when_asked(points_table):
    fc = FeatureCollection.from_table(points_table, remove=False)
    assert "x" in fc.columns and "y" in fc.columns


def test_table_round_trip_is_lossless(points_table):
    fc = FeatureCollection.from_table(points_table, coords=("x", "y"), crs=4326)
    back = fc.to_table(coords=("x", "y"))
    pd.testing.assert_frame_equal(back, points_table, check_like=True)


def test_table_round_trip_three_dimensions():
    table = pd.DataFrame({"e": [1.0, 2.0], "n": [3.0, 4.0], "h": [700.0, 710.5]})
    fc = FeatureCollection.from_table(table, coords=("e", "n", "h"), crs=31983)
    assert fc.geometry.has_z.all()
    pd.testing.assert_frame_equal(fc.to_table(coords=("e", "n", "h")), table)


def test_from_table_rejects_missing_coordinates(points_table):
    points_table.loc[1, "x"] = np.nan
    with pytest.raises(GeometryError, match="ausentes"):
        FeatureCollection.from_table(points_table)


def test_to_table_requires_points(squares):
    with pytest.raises(GeometryError):
        squares.to_table()


def test_from_wkt_and_to_wkt_table():
    table = pd.DataFrame({"id": [1, 2], "wkt": ["POINT (1 1)", "LINESTRING (0 0, 0 3)"]})
    fc = FeatureCollection.from_wkt(table, crs=3857)
    assert fc.geometry_types.tolist() == ["Point", "LineString"]
    assert fc.to_wkt_table()["wkt"].tolist() == ["POINT (1 1)", "LINESTRING (0 0, 0 3)"]


def test_from_wkt_rejects_invalid_text():
    with pytest.raises(GeometryError):
        FeatureCollection.from_wkt(pd.DataFrame({"wkt": ["POINT (1"]}))


def test_constructor_validates_geometry_column():
    with pytest.raises(MissingColumnError):
        FeatureCollection(pd.DataFrame({"a": [1]}))
    with pytest.raises(GeometryError):
        FeatureCollection(pd.DataFrame({"geometry": ["nope"]}))


def test_constructor_rejects_mixed_dimension_parts():
    mixed = GeometryCollection([Point(0, 0), Point(1, 1, 1)])
    with pytest.raises(GeometryError, match="2D e 3D"):
        FeatureCollection(pd.DataFrame({"geometry": [mixed]}), crs=3857)

    flat = GeometryCollection([Point(0, 0), LineString([(0, 0), (1, 1)])])
    assert len(FeatureCollection(pd.DataFrame({"geometry": [flat, None]}))) == 2


def test_from_records_without_records():
    fc = FeatureCollection.from_records([], crs=4326)
    assert fc.is_empty
    assert fc.geometry_name == "geometry"
    assert fc.crs.to_epsg() == 4326

    assert FeatureCollection.from_records(iter([]), geometry="geom").geometry_name == "geom"


def test_constructor_rejects_conflicting_crs(points):
    with pytest.raises(CRSError):
        FeatureCollection(points.frame, crs=4326)


def test_from_records_with_custom_geometry_name():
    fc = FeatureCollection.from_records(
        [{"id": 1, "geom": Point(0, 0)}, {"id": 2, "geom": None}],
        geometry="geom",
        crs=4326,
    )
    assert fc.geometry_name == "geom"
    assert fc.geometry.isna().tolist() == [False, True]


def test_operations_do_not_mutate_input(points):
    before = points.frame
    points.mutate(value=0).filter("id > 2").buffer(3).to_crs(4326)
    pd.testing.assert_frame_equal(points.frame, before)


def test_access_helpers(points):
    assert len(list(points)) == 4
    assert list(points)[0]["name"] == "a"
    assert points["name"].tolist() == ["a", "b", "c", "d"]
    assert points[["name"]].columns == ["name", "geometry"]
    assert len(points[points["value"] > 15]) == 3
    assert points.total_bounds == (0.5, 0.5, 20.0, 20.0)
    assert "4 registros" in repr(points)
    assert len(points.head(2)) == 2
    assert not points.is_empty
    assert "geometry" not in points.drop_geometry().columns


def test_select_keeps_geometry_sticky(points):
    assert points.select("name").columns == ["name", "geometry"]
    assert points.select("-kind", "-geometry").columns == ["id", "name", "value", "geometry"]
    assert points.select("geometry", "id").columns == ["id", "geometry"]


def test_rename_and_rename_geometry(points):
    assert "nome" in points.rename(nome="name").columns
    with pytest.raises(ValueError):
        points.rename(geom="geometry")
    assert points.rename_geometry("geom").geometry_name == "geom"


def test_attribute_verbs_chain(points):
    out = (
        points.filter(lambda d: d["kind"] == "escola")
        .mutate(double=lambda d: d["value"] * 2)
        .arrange("-value")
    )
    assert out["id"].tolist() == [4, 3, 1]
    assert out["double"].tolist() == [80.0, 60.0, 20.0]
    assert isinstance(out, FeatureCollection)


def test_distinct_and_drop_na(points):
    assert points.distinct("kind")["kind"].tolist() == ["escola", "posto"]
    assert points.distinct("kind").columns == ["kind", "geometry"]
    assert len(points.mutate(value=[1.0, np.nan, 3.0, 4.0]).drop_na("value")) == 3


def test_group_by_summarise_unions_geometry(points):
    grouped = points.group_by("kind")
    assert isinstance(grouped, GroupedFeatureCollection)
    assert len(grouped) == 2

    out = grouped.summarise(total=("value", "sum"))
    assert out.attributes.to_dict("list") == {"kind": ["escola", "posto"], "total": [80.0, 20.0]}
    assert out.geometry.iloc[0].equals(MultiPoint([(0.5, 0.5), (5.5, 5.5), (20, 20)]))
    assert out.crs == points.crs


def test_summarise_combine_without_union(squares):
    overlapping = squares.mutate(geometry=[box(0, 0, 2, 2), box(1, 1, 3, 3)])
    unioned = overlapping.summarise(n=len)
    combined = overlapping.summarise(n=len, union=False)
    assert unioned.geometry.iloc[0].geom_type == "Polygon"
    assert unioned.area().iloc[0] == pytest.approx(7.0)
    assert combined.geometry.iloc[0].geom_type == "MultiPolygon"
    assert combined["n"].tolist() == [2]


def test_grouped_mutate_filter_and_count(points):
    g = points.group_by("kind")
    assert g.count()["n"].tolist() == [3, 1]
    top = g.filter(lambda d: d["value"] == d["value"].max()).ungroup()
    assert top["id"].tolist() == [2, 4]
    shares = g.mutate(share=lambda d: d["value"] / d["value"].sum()).ungroup()
    assert shares["share"].tolist() == pytest.approx([0.125, 1.0, 0.375, 0.5])


def test_attribute_joins(points):
    info = pd.DataFrame({"id": [1, 1, 3, 99], "extra": ["p", "q", "r", "s"]})

    left = points.left_join(info, by="id")
    assert set(left["id"]) == {1, 2, 3, 4}
    assert len(left) == 5

    inner = points.inner_join(info, by="id")
    assert sorted(inner["id"]) == [1, 1, 3]

    semi = points.semi_join(info, by="id")
    assert semi["id"].tolist() == [1, 3]
    assert semi.columns == points.columns

    anti = points.anti_join(info, by="id")
    assert anti["id"].tolist() == [2, 4]

    right = points.right_join(info, by="id")
    assert right.geometry.isna().sum() == 1

    full = points.full_join(info, by="id")
    assert len(full) == 6
    assert full.crs == points.crs


def test_attribute_join_refuses_spatial_right_side(points, squares):
    with pytest.raises(TypeError):
        points.left_join(squares)


def test_pivot_longer_repeats_geometry(points):
    long = points.select("id", "value").mutate(other=1.0).pivot_longer(["value", "other"])
    assert len(long) == 8
    assert long.geometry.iloc[0].equals(long.geometry.iloc[1])
    assert long.columns == ["id", "geometry", "name", "value"]


def test_separate_and_unite_on_collection(points):
    out = points.mutate(code=lambda d: d["kind"] + "-" + d["name"]).separate(
        "code", ["k", "n"], sep="-"
    )
    assert out["n"].tolist() == ["a", "b", "c", "d"]
    united = out.unite("code", ["k", "n"], sep="-")
    assert united["code"].iloc[0] == "escola-a"


def test_to_crs_is_idempotent(points):
    same = points.to_crs(3857)
    np.testing.assert_allclose(
        same.to_table()[["x", "y"]].to_numpy(),
        points.to_table()[["x", "y"]].to_numpy(),
        atol=1e-9,
    )


def test_to_crs_round_trip(points):
    back = points.to_crs(4326).to_crs("EPSG:3857")
    np.testing.assert_allclose(
        back.to_table()[["x", "y"]].to_numpy(),
        points.to_table()[["x", "y"]].to_numpy(),
        atol=1e-6,
    )


def test_crs_required_for_to_crs():
    fc = FeatureCollection(pd.DataFrame({"geometry": [Point(0, 0)]}))
    assert fc.crs is None
    with pytest.raises(CRSError):
        fc.to_crs(4326)
    assert fc.set_crs(4326).crs.to_epsg() == 4326


def test_set_crs_requires_override(points):
    with pytest.raises(CRSError):
        points.set_crs(4326)
    assert points.set_crs(4326, allow_override=True).crs.to_epsg() == 4326


def test_estimate_utm_crs():
    fc = FeatureCollection.from_table(
        pd.DataFrame({"x": [-46.63], "y": [-23.55]}), crs=4326
    )
    assert fc.estimate_utm_crs().to_epsg() == 32723


def test_buffer_and_measures(points, squares):
    buffered = points.buffer(1)
    assert set(buffered.geometry_types) == {"Polygon"}
    assert buffered.area().iloc[0] == pytest.approx(np.pi, rel=1e-2)
    assert squares.area().tolist() == [4.0, 4.0]
    assert squares.boundary().length().tolist() == [8.0, 8.0]
    assert squares.centroid().geometry.iloc[0].equals(Point(1, 1))


def test_buffer_in_geographic_crs_warns(points, caplog):
    with caplog.at_level(logging.WARNING, logger="tidysf"):
        points.set_crs(4326, allow_override=True).buffer(0.1)
    assert "CRS geográfico" in caplog.text


def test_unary_geometry_operations(squares):
    hull = squares.convex_hull()
    assert hull.area().tolist() == [4.0, 4.0]
    env = squares.envelope()
    assert env.geometry.iloc[1].equals(box(5, 5, 7, 7))
    simple = squares.simplify(0.1)
    assert len(simple) == 2
    bowtie = Polygon([(0, 0), (2, 2), (2, 0), (0, 2)])
    fixed = squares.mutate(geometry=[bowtie, box(0, 0, 1, 1)]).make_valid()
    assert fixed.geometry.is_valid.all()


def test_predicates_against_single_geometry(points):
    area = box(0, 0, 2, 2)
    assert points.intersects(area).tolist() == [True, True, False, False]
    assert points.within(area).tolist() == [True, True, False, False]
    assert points.disjoint(area).tolist() == [False, False, True, True]


def test_predicates_against_collection(points, squares):
    assert points.within(squares) == [[0], [0], [1], []]
    assert squares.contains(points) == [[0, 1], [2]]
    assert points.disjoint(squares) == [[1], [1], [0], [0, 1]]


def test_unknown_predicate(points, squares):
    with pytest.raises(ValueError):
        points._predicate("near", squares)


def test_operations_between_collections_require_same_crs(points, squares):
    with pytest.raises(CRSError):
        points.to_crs(4326).intersects(squares)
    with pytest.raises(CRSError):
        points.to_crs(4326).spatial_join(squares)


def test_distance(points, squares):
    d = points.distance(Point(0.5, 0.5))
    assert d.iloc[0] == 0.0
    matrix = points.distance(squares)
    assert matrix.shape == (4, 2)
    assert matrix.iloc[0, 0] == 0.0
    assert matrix.iloc[3, 1] == pytest.approx(np.hypot(13, 13))


def test_spatial_join_and_filter(points, squares):
    inner = points.spatial_join(squares)
    assert inner["zone"].tolist() == ["norte", "norte", "sul"]
    assert "index_right" not in inner.columns
    assert set(inner.geometry_types) == {"Point"}

    left = points.spatial_join(squares, how="left")
    assert len(left) == 4
    assert left["zone"].isna().sum() == 1

    kept = points.spatial_filter(squares)
    assert kept["id"].tolist() == [1, 2, 3]
    assert kept.columns == points.columns

    assert points.spatial_filter(box(0, 0, 1, 1))["id"].tolist() == [1]

    with pytest.raises(ValueError):
        points.spatial_join(squares, how="outer")


def test_grouped_verbs_after_multiple_spatial_matches():
    zones = FeatureCollection(
        gpd.GeoDataFrame(
            {"zone": ["a", "b"]}, geometry=[box(0, 0, 2, 2), box(0, 0, 3, 3)], crs=3857
        )
    )
    point = FeatureCollection(
        gpd.GeoDataFrame({"id": [1]}, geometry=[Point(1, 1)], crs=3857)
    )

    joined = point.spatial_join(zones)
    assert sorted(joined["zone"]) == ["a", "b"]
    assert joined.frame.index.tolist() == [0, 1]

    kept = joined.group_by("zone").filter(lambda d: d["zone"] == "a").ungroup()
    assert kept["zone"].tolist() == ["a"]

    sizes = joined.group_by("zone").mutate(n=lambda d: len(d)).ungroup()
    assert sizes["n"].tolist() == [1, 1]


def test_spatial_join_suffixes_for_shared_columns(points, squares):
    joined = points.spatial_join(squares.mutate(id=[10, 20]))
    assert "id" not in joined.columns
    assert joined["id.x"].tolist() == [1, 2, 3]
    assert joined["id.y"].tolist() == [10, 10, 20]


def test_set_operations_with_collection(squares):
    cutter = FeatureCollection(
        gpd.GeoDataFrame({"tag": ["c"]}, geometry=[box(1, 1, 6, 6)], crs=3857)
    )
    inter = squares.intersection(cutter)
    assert sorted(inter.area().round(6).tolist()) == [1.0, 1.0]
    assert "tag" in inter.columns
    assert inter.geometry_name == "geometry"

    diff = squares.difference(cutter)
    assert sorted(diff.area().round(6).tolist()) == [3.0, 3.0]

    union = squares.union(cutter)
    assert union.union_all().area == pytest.approx(4 + 4 + 25 - 2)

    sym = squares.sym_difference(cutter)
    assert sym.union_all().area == pytest.approx(4 + 4 + 25 - 2 - 2)


def test_set_operations_with_single_geometry(squares):
    out = squares.intersection(box(1, 1, 6, 6))
    assert out.area().tolist() == [1.0, 1.0]
    assert squares.union(box(0, 0, 1, 1)).area().tolist() == [4.0, 5.0]


def test_union_all(squares):
    assert squares.union_all().area == 8.0
    assert squares.filter("zone == 'none'").union_all().is_empty


def test_line_measures():
    fc = FeatureCollection.from_records(
        [{"geometry": LineString([(0, 0), (3, 4)])}], crs=3857
    )
    assert fc.length().tolist() == [5.0]
