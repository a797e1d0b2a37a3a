"""Built-in smoke-test corpus, written against the sakila sample schema."""

TEST_SQLS = (
    "SELECT * FROM film",
    "SELECT title FROM film",
    "SELECT title FROM film WHERE film_id = 1",
    "SELECT title FROM film WHERE title LIKE '%ACADEMY'",
    "SELECT title FROM film WHERE title LIKE 'ACADEMY DINOSAUR'",
    "SELECT title FROM film WHERE title LIKE 'ACADEMY%'",
    "SELECT title FROM film ORDER BY RAND() LIMIT 1",
    "SELECT title FROM film WHERE length > 100 LIMIT 10",
    "SELECT title FROM film WHERE length > 100 ORDER BY title LIMIT 10",
    "SELECT SQL_CALC_FOUND_ROWS title FROM film WHERE rating = 'PG' LIMIT 10",
    "SELECT title FROM film WHERE last_update > SYSDATE()",
    "SELECT title FROM film WHERE last_update > NOW()",
    "SELECT COUNT(*) FROM film WHERE rating = 'PG'",
    "SELECT f.* FROM film f WHERE f.film_id = 1",
    "SELECT title FROM film WHERE film_id IN (1, 2, 3)",
    "SELECT title FROM film WHERE film_id NOT IN (1, 2, 3)",
    "SELECT title FROM film WHERE release_year = '2006'",
    "SELECT title FROM film WHERE language_id = 1 OR original_language_id = 1",
    "SELECT rating, COUNT(*) FROM film GROUP BY rating",
    "SELECT rating, COUNT(*) FROM film WHERE length > 60 GROUP BY 1",
    "SELECT rating, COUNT(*) FROM film WHERE length > 60 GROUP BY rating HAVING COUNT(*) > 10",
    "SELECT DISTINCT rating FROM film WHERE length > 60",
    "SELECT title FROM film WHERE film_id = (SELECT film_id FROM inventory WHERE inventory_id = 1)",
    "SELECT title FROM film WHERE film_id IN (SELECT film_id FROM film_actor WHERE actor_id = 1)",
    "SELECT f.title, a.first_name FROM film f JOIN film_actor fa ON f.film_id = fa.film_id JOIN actor a ON a.actor_id = fa.actor_id WHERE a.actor_id = 1",
    "SELECT f.title FROM film f LEFT JOIN inventory i ON f.film_id = i.film_id WHERE i.inventory_id IS NULL",
    "SELECT c.first_name FROM customer c, address a WHERE c.address_id = a.address_id AND a.city_id = 1",
    "SELECT title FROM film WHERE film_id = 1 UNION SELECT title FROM film WHERE film_id = 2",
    "SELECT title FROM film WHERE film_id = 1 UNION ALL SELECT title FROM film WHERE film_id = 2",
    "SELECT title FROM film WHERE UPPER(title) = 'ACADEMY DINOSAUR'",
    "SELECT title FROM film WHERE length + 10 > 100",
    "SELECT title FROM film WHERE description REGEXP 'drama'",
    "SELECT title FROM film ORDER BY title DESC, film_id ASC LIMIT 10",
    "INSERT INTO actor (first_name, last_name) VALUES ('PENELOPE', 'GUINESS')",
    "INSERT INTO actor (first_name, last_name) VALUES ('A', 'B'), ('C', 'D')",
    "INSERT INTO actor_copy SELECT * FROM actor",
    "REPLACE INTO actor (actor_id, first_name, last_name) VALUES (1, 'PENELOPE', 'GUINESS')",
    "UPDATE film SET rental_rate = 0.99",
    "UPDATE film SET rental_rate = 0.99 WHERE film_id = 1",
    "DELETE FROM rental",
    "DELETE FROM rental WHERE rental_id = 1",
    "CREATE TABLE tbl (id INT NOT NULL AUTO_INCREMENT, name VARCHAR(64), PRIMARY KEY (id)) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4",
    "ALTER TABLE film ADD INDEX idx_title (title)",
    "TRUNCATE TABLE rental",
)
