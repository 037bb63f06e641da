from catalog_seeder.main import app

app(prog_name="catalog-seeder")
