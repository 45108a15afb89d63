import typer
from pathlib import Path
import warnings

from tidysf import FeatureIO
from tidysf.log import configure_logging
from tidysf.models.crs import describe_crs

warnings.filterwarnings(
    "ignore",
    message="Measured \\(M\\) geometry types are not supported.*",
    category=UserWarning,
    module="pyogrio"
)

app = typer.Typer(pretty_exceptions_enable=False)


def resolve_uri(uri: str) -> str:
    """
    Resolve caminhos locais como absolutos; URIs com esquema passam intactos.
    """
    if "://" in uri:
        return uri
    return Path(uri).expanduser().resolve().as_posix()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log detalhado."),
):
    """
    Ferramentas de linha de comando para coleções de feições.
    """
    configure_logging("DEBUG" if verbose else None)


@app.command()
def info(
    uri: str = typer.Argument(..., help="Conjunto de dados espaciais."),
    layer: str = typer.Option(None, "--layer", "-l", help="Camada a ler."),
):
    """
    Mostra registros, CRS, tipos de geometria, colunas e extensão.
    """
    fc = FeatureIO().read(resolve_uri(uri), layer=layer)

    kinds = fc.geometry_types.value_counts(dropna=False)

    typer.echo(f"Registros: {len(fc)}")
    typer.echo(f"CRS: {describe_crs(fc.crs)}")
    typer.echo("Geometrias: " + ", ".join(f"{k} ({n})" for k, n in kinds.items()))
    typer.echo(f"Colunas: {', '.join(fc.attributes.columns)}")
    if len(fc):
        minx, miny, maxx, maxy = fc.total_bounds
        typer.echo(f"Extensão: {minx:.6f} {miny:.6f} {maxx:.6f} {maxy:.6f}")


@app.command()
def convert(
    src: str = typer.Argument(..., help="Origem."),
    dest: str = typer.Argument(..., help="Destino; o formato vem do sufixo."),
    crs: str = typer.Option(None, "--crs", help="Reprojeta para este CRS."),
    layer: str = typer.Option(None, "--layer", "-l", help="Camada de origem."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Substitui o destino."),
):
    """
    Converte entre formatos, opcionalmente reprojetando.
    """
    fio = FeatureIO()
    fc = fio.read(resolve_uri(src), layer=layer)
    if crs:
        fc = fc.to_crs(crs)

    out = fio.write(fc, resolve_uri(dest), overwrite=overwrite)
    typer.echo(f"✔ {len(fc)} registros gravados em {out}")


@app.command("from-csv")
def from_csv(
    src: str = typer.Argument(..., help="CSV de origem."),
    dest: str = typer.Argument(..., help="Destino espacial."),
    x: str = typer.Option("x", "--x", help="Coluna da coordenada X (longitude)."),
    y: str = typer.Option("y", "--y", help="Coluna da coordenada Y (latitude)."),
    crs: str = typer.Option("4326", "--crs", help="CRS das coordenadas."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Substitui o destino."),
):
    """
    Converte uma tabela de pontos em CSV para um formato espacial.
    """
    fio = FeatureIO()
    fc = fio.read_csv(resolve_uri(src), coords=(x, y), crs=crs)

    out = fio.write(fc, resolve_uri(dest), overwrite=overwrite)
    typer.echo(f"✔ {len(fc)} pontos gravados em {out}")


@app.command()
def buffer(
    src: str = typer.Argument(..., help="Origem."),
    dest: str = typer.Argument(..., help="Destino."),
    distance: float = typer.Option(..., "--distance", "-d", help="Distância, na unidade do CRS."),
    crs: str = typer.Option(None, "--crs", help="Reprojeta antes do buffer."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Substitui o destino."),
):
    """
    Gera áreas de influência em torno de cada geometria.
    """
    fio = FeatureIO()
    fc = fio.read(resolve_uri(src))
    if crs:
        fc = fc.to_crs(crs)

    out = fio.write(fc.buffer(distance), resolve_uri(dest), overwrite=overwrite)
    typer.echo(f"✔ {len(fc)} geometrias gravadas em {out}")


if __name__ == "__main__":
    app()
